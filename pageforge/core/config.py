"""
Generator configuration.

Defaults match the values the generated page objects use at runtime;
a JSON file may override any of them.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional
import json


@dataclass
class GeneratorConfig:
    """Configuration for page parsing, crawling and file output."""
    timeout: float = 10.0  # Seconds to wait for elements / document ready
    max_depth: int = 2  # Crawl depth bound
    output_dir: str = "./generated_pages"
    headless: bool = True
    base_package: str = "pages"  # Root of derived package names
    window_size: str = "1920,1080"
    profile_path: Optional[str] = None  # Chrome user-data dir, keeps logins between runs

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratorConfig":
        """Create from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, path: str) -> "GeneratorConfig":
        """
        Load configuration from a JSON file.

        Args:
            path: Path to a JSON object whose keys are field names

        Returns:
            GeneratorConfig with file values over the defaults
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

"""
Name Allocator - Element keys to unique identifiers.

camelCase normalisation can map distinct keys onto the same name
(``my-button`` and ``my_button``), so names are handed out through a
collision table scoped to one emission.
"""

from typing import Dict, Set
import keyword
import logging
import re

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]+")


def format_element_name(key: str) -> str:
    """
    Normalise an element key into a camelCase identifier.

    Non-alphanumeric runs become word breaks, a leading digit gets an
    ``element_`` prefix, and each letter after a break is uppercased.

    Args:
        key: Element key

    Returns:
        Identifier-safe camelCase name (not yet collision-checked)
    """
    formatted = _NON_ALNUM.sub("_", key)
    if formatted[:1].isdigit():
        formatted = "element_" + formatted

    words = formatted.split("_")
    name = words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])

    if not name:
        return "element"
    if keyword.iskeyword(name):
        return "element" + name[:1].upper() + name[1:]
    return name


class NameAllocator:
    """
    Hands out collision-free names for one emission.

    Example:
        >>> allocator = NameAllocator()
        >>> allocator.allocate("my-button")
        'myButton'
        >>> allocator.allocate("my_button")
        'myButton2'
    """

    def __init__(self) -> None:
        self._used: Set[str] = set()
        self._next_suffix: Dict[str, int] = {}

    def allocate(self, key: str) -> str:
        """Normalise ``key`` and return an unused name derived from it."""
        return self.reserve(format_element_name(key))

    def reserve(self, name: str) -> str:
        """
        Return ``name`` if unused, else the first free ``name2``, ``name3``, ...

        Args:
            name: Already identifier-safe base name

        Returns:
            The name actually reserved
        """
        candidate = name
        if candidate in self._used:
            suffix = self._next_suffix.get(name, 2)
            while f"{name}{suffix}" in self._used:
                suffix += 1
            candidate = f"{name}{suffix}"
            self._next_suffix[name] = suffix + 1
            logger.debug(f"[NameAllocator] '{name}' already used, allocated '{candidate}'")
        self._used.add(candidate)
        return candidate

    def __contains__(self, name: str) -> bool:
        return name in self._used

    def __len__(self) -> int:
        return len(self._used)

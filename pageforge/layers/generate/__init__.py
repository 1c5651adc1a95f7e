"""Generate Layer - Naming, artifact emission and source rendering."""

from pageforge.layers.generate.emitter import (
    ElementSpec,
    Operation,
    OperationKind,
    PageArtifact,
    PageObjectEmitter,
    WaitCondition,
)
from pageforge.layers.generate.name_allocator import NameAllocator
from pageforge.layers.generate.renderer import render_python

__all__ = [
    "ElementSpec",
    "Operation",
    "OperationKind",
    "PageArtifact",
    "PageObjectEmitter",
    "WaitCondition",
    "NameAllocator",
    "render_python",
]

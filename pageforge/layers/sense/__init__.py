"""Sense Layer - Element collection and locator inference."""

from pageforge.layers.sense.element_collector import CollectedElement, ElementCollector, PopupCollector
from pageforge.layers.sense.locator_inference import (
    ElementRole,
    KeyTier,
    LocatorKind,
    LocatorSpec,
    infer_locator,
    infer_role,
)

__all__ = [
    "CollectedElement",
    "ElementCollector",
    "PopupCollector",
    "ElementRole",
    "KeyTier",
    "LocatorKind",
    "LocatorSpec",
    "infer_locator",
    "infer_role",
]

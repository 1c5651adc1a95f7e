"""Action Layer - Runtime base for generated page objects."""

from pageforge.layers.action.page_object import ArtifactPage, BasePage

__all__ = ["ArtifactPage", "BasePage"]

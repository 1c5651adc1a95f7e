"""Session Layer - Cookie persistence."""

from pageforge.layers.session.cookie_store import CookieLoadResult, CookieRecord, CookieStore

__all__ = ["CookieLoadResult", "CookieRecord", "CookieStore"]

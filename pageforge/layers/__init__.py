"""Layers - Sense, generate, crawl, session and action components."""

"""Canonical URL and permalink overrides for published content items."""

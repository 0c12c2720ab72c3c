"""Build a single-file link-in-bio page from a TOML description."""

from .cli import app, main

__all__ = ["app", "main"]

"""FastAPI application exposing the cache service."""

from vscache.api.app import create_app, main

__all__ = ["create_app", "main"]

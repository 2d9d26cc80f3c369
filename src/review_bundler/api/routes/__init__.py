"""Route handlers for the API."""

from review_bundler.api.routes import bundles, health

__all__ = [
    "bundles",
    "health",
]

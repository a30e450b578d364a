"""Example catalog: manifest models and the read-only registry.

Key classes:
    ManifestEntry     - One buildable example (contract, test, shared files, npm deps)
    CategoryManifest  - Ordered bundle of example ids
    ManifestRegistry  - Immutable lookup over examples and categories
"""

from .models import CategoryManifest, ManifestEntry
from .registry import CatalogError, ManifestRegistry

__all__ = [
    "CatalogError",
    "CategoryManifest",
    "ManifestEntry",
    "ManifestRegistry",
]

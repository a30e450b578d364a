"""Read-only lookup over the example catalog.

The registry is built once (from the built-in catalog or a YAML/JSON file)
and then handed to the resolver and CLI by reference.  It has no
registration API; every lookup failure is an ``UnknownIdentifier`` carrying
the valid ids so the caller can show them.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from ..errors import UnknownIdentifier
from .models import CategoryManifest, ManifestEntry


class CatalogError(ValueError):
    """The catalog data itself is inconsistent."""


class ManifestRegistry:
    """Immutable catalog of examples and categories."""

    def __init__(
        self,
        examples: Mapping[str, ManifestEntry],
        categories: Mapping[str, CategoryManifest] | None = None,
    ) -> None:
        categories = categories or {}
        for key, entry in examples.items():
            if key != entry.id:
                raise CatalogError(f"Example key '{key}' does not match entry id '{entry.id}'")
        for key, category in categories.items():
            if key != category.id:
                raise CatalogError(
                    f"Category key '{key}' does not match category id '{category.id}'"
                )
            unknown = [e for e in category.entries if e not in examples]
            if unknown:
                raise CatalogError(
                    f"Category '{key}' references unknown examples: {', '.join(unknown)}"
                )
        self._examples = MappingProxyType(dict(examples))
        self._categories = MappingProxyType(dict(categories))

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ManifestRegistry":
        """Build a registry from ``{"examples": {...}, "categories": {...}}``.

        Ids are taken from the mapping keys, so entries do not repeat them.
        """
        examples = {
            key: ManifestEntry.model_validate({**(raw or {}), "id": key})
            for key, raw in (data.get("examples") or {}).items()
        }
        categories = {
            key: CategoryManifest.model_validate({**(raw or {}), "id": key})
            for key, raw in (data.get("categories") or {}).items()
        }
        return cls(examples, categories)

    @classmethod
    def from_file(cls, path: str | Path) -> "ManifestRegistry":
        """Load a catalog from a YAML (or JSON) file."""
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise CatalogError(f"Catalog file {path} must contain a mapping")
        return cls.from_mapping(raw)

    @classmethod
    def builtin(cls) -> "ManifestRegistry":
        """The FHEVM example catalog shipped with the package."""
        from .builtin import CATALOG

        return cls.from_mapping(CATALOG)

    # -- Lookups -----------------------------------------------------------

    def lookup_example(self, example_id: str) -> ManifestEntry:
        try:
            return self._examples[example_id]
        except KeyError:
            raise UnknownIdentifier("example", example_id, self._examples) from None

    def lookup_category(self, category_id: str) -> CategoryManifest:
        try:
            return self._categories[category_id]
        except KeyError:
            raise UnknownIdentifier("category", category_id, self._categories) from None

    def entries_for_category(self, category_id: str) -> list[ManifestEntry]:
        """Resolve a category's example ids to entries, in category order."""
        category = self.lookup_category(category_id)
        return [self._examples[e] for e in category.entries]

    def list_examples(self) -> list[str]:
        return list(self._examples)

    def list_categories(self) -> list[str]:
        return list(self._categories)

    def examples_by_category(self) -> dict[str, list[ManifestEntry]]:
        """Group entries by their ``category`` label, preserving catalog order."""
        grouped: dict[str, list[ManifestEntry]] = {}
        for entry in self._examples.values():
            grouped.setdefault(entry.category or "Uncategorised", []).append(entry)
        return grouped

    def __contains__(self, example_id: object) -> bool:
        return example_id in self._examples

    def __len__(self) -> int:
        return len(self._examples)

"""Pydantic v2 models for the example catalog.

A ``ManifestEntry`` describes one buildable example: where its contract and
test live in the catalog, which shared contract files it needs, and which npm
packages it adds.  A ``CategoryManifest`` groups entries under a display name.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ManifestEntry(BaseModel):
    """Catalog record for a single example project."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique key, e.g. 'fhe-counter'")
    primary_asset: str = Field(
        ..., description="Catalog-relative path of the Solidity contract"
    )
    test_asset: str = Field(..., description="Catalog-relative path of the test suite")
    auxiliary_assets: tuple[str, ...] = Field(
        default=(),
        description="Shared contract files (interfaces, mocks) the example imports",
    )
    extra_dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="npm package -> version constraint merged into package.json",
    )
    display_title: str = Field(default="")
    description: str = Field(default="")
    category: str = Field(default="")

    @field_validator("auxiliary_assets")
    @classmethod
    def _dedupe_auxiliary(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @property
    def package_name(self) -> str:
        """Name written into the generated package.json."""
        return f"fhevm-example-{self.id}"


class CategoryManifest(BaseModel):
    """An ordered, non-empty bundle of example ids."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., description="Display name, e.g. 'Basic FHEVM Examples'")
    description: str = Field(default="")
    entries: tuple[str, ...] = Field(..., min_length=1, description="Example ids in build order")

    @property
    def package_name(self) -> str:
        return f"fhevm-examples-{self.id}"

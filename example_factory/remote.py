"""Materialise catalog assets and the base template from GitHub.

The core never talks to the network: this module fills a local staging
directory first, and the resolver, composer and injection engine then read
from it as if it were a checked-out catalog.

Typical usage::

    fetcher = RemoteCatalog(config.remote)
    staging = await fetcher.fetch_entries(entries, tmp_dir)
    await fetcher.clone_template(tmp_dir / "fhevm-hardhat-template")
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import httpx

from .catalog.models import ManifestEntry
from .config import RemoteConfig
from .errors import FactoryError, MissingSourceFile
from .utils import print_info, run_command


class RemoteFetchError(FactoryError):
    """Downloading an asset or cloning the template failed."""


class RemoteCatalog:
    """Downloads the files a set of manifest entries needs."""

    def __init__(self, config: RemoteConfig | None = None) -> None:
        self.config = config or RemoteConfig()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.config.raw_base_url.rstrip('/')}/{self.config.branch}/",
            timeout=httpx.Timeout(self.config.timeout, connect=10.0),
            follow_redirects=True,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_entries(
        self, entries: Iterable[ManifestEntry], staging_root: str | Path
    ) -> Path:
        """Download every asset declared by *entries* below *staging_root*.

        Files keep their catalog-relative paths, so *staging_root* can be used
        as ``catalog_root`` afterwards.  Already-downloaded paths are skipped.

        Raises:
            MissingSourceFile: The server answered 404 for a declared asset.
            RemoteFetchError: Any other HTTP or transport failure.
        """
        root = Path(staging_root)
        paths: dict[str, str] = {}
        for entry in entries:
            for asset in (entry.primary_asset, entry.test_asset, *entry.auxiliary_assets):
                paths.setdefault(asset, entry.id)

        async with self._client() as client:
            for asset, entry_id in paths.items():
                destination = root / asset
                if destination.is_file():
                    continue
                await self._download(client, asset, destination, entry_id)
        return root

    async def clone_template(self, destination: str | Path) -> Path:
        """Shallow-clone the repository and return the template directory inside it.

        Raises:
            RemoteFetchError: ``git clone`` failed or timed out.
        """
        destination = Path(destination)
        checkout = destination.parent / f"{destination.name}-checkout"
        print_info(f"Cloning {self.config.repo_url} ({self.config.branch})...")
        try:
            code, _, stderr = await run_command(
                [
                    "git",
                    "clone",
                    "--depth",
                    "1",
                    "--branch",
                    self.config.branch,
                    self.config.repo_url,
                    str(checkout),
                ],
                timeout=self.config.timeout * 4,
            )
        except OSError as exc:
            raise RemoteFetchError(f"Cannot run git: {exc}") from exc
        if code != 0:
            raise RemoteFetchError(f"git clone failed (exit {code}): {stderr}")

        template = checkout / self.config.template_path
        if not template.is_dir():
            raise RemoteFetchError(
                f"Template directory '{self.config.template_path}' not found in {self.config.repo_url}"
            )
        template.rename(destination)
        return destination

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _download(
        self,
        client: httpx.AsyncClient,
        asset: str,
        destination: Path,
        entry_id: str,
    ) -> None:
        try:
            response = await client.get(asset)
            if response.status_code == 404:
                raise MissingSourceFile(f"{self.config.raw_base_url}/{asset}", entry_id)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"Failed to download {asset}: {exc}") from exc
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(response.content)

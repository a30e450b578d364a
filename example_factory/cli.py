"""Command-line interface for the example factory.

Subcommands::

    example-factory list
    example-factory create --example fhe-counter --output ./fhe-counter
    example-factory create --category basic
    example-factory add --example fhe-counter --target ./my-hardhat-app --on-conflict rename
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import tempfile
from pathlib import Path

from rich.table import Table

from .catalog.models import ManifestEntry
from .catalog.registry import CatalogError, ManifestRegistry
from .config import FactoryConfig
from .errors import ApplyFailure, FactoryError, UnknownIdentifier
from .injector import Decision, InjectionEngine, InjectionSummary, fixed_policy, prompt_policy
from .remote import RemoteCatalog
from .resolver import AssetSet
from .scaffolder import create_category_project, create_example_project
from .utils import (
    console,
    format_category_name,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Setup helpers
# ---------------------------------------------------------------------------


def load_config(args: argparse.Namespace) -> FactoryConfig:
    """Environment defaults overridden by command-line flags."""
    config = FactoryConfig.from_env()
    update: dict[str, object] = {}
    if args.catalog_root:
        update["catalog_root"] = Path(args.catalog_root)
    if args.template_dir:
        update["template_dir"] = Path(args.template_dir)
    if args.catalog_file:
        update["catalog_file"] = Path(args.catalog_file)
    if getattr(args, "no_git", False):
        update["template"] = config.template.model_copy(update={"init_git": False})
    return config.model_copy(update=update) if update else config


def load_registry(config: FactoryConfig) -> ManifestRegistry:
    if config.catalog_file is not None:
        return ManifestRegistry.from_file(config.catalog_file)
    return ManifestRegistry.builtin()


def _report_diagnostics(asset_set: AssetSet) -> None:
    for diagnostic in asset_set.diagnostics:
        print_warning(f"{diagnostic.kind.value}: {diagnostic.message}")


def _report_unknown(exc: UnknownIdentifier) -> None:
    print_error(f"Error: unknown {exc.kind} '{exc.identifier}'")
    console.print(f"Available {exc.kind}s:")
    for identifier in exc.valid:
        console.print(f"  - {identifier}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_list(registry: ManifestRegistry) -> None:
    table = Table(title="FHEVM Examples", show_header=True, header_style="bold cyan")
    table.add_column("Example", no_wrap=True)
    table.add_column("Category", style="dim")
    table.add_column("Description")
    for category, entries in registry.examples_by_category().items():
        for entry in entries:
            table.add_row(entry.id, format_category_name(category), entry.description)
    console.print(table)

    if registry.list_categories():
        console.print()
        console.print("[bold]Categories:[/bold]")
        for category_id in registry.list_categories():
            category = registry.lookup_category(category_id)
            console.print(f"  [cyan]{category_id}[/cyan]  {category.name} ({len(category.entries)} examples)")


async def cmd_create(
    args: argparse.Namespace, config: FactoryConfig, registry: ManifestRegistry
) -> Path:
    if args.example:
        entries = [registry.lookup_example(args.example)]
        default_name = entries[0].package_name
    else:
        entries = registry.entries_for_category(args.category)
        default_name = registry.lookup_category(args.category).package_name
    output = Path(args.output) if args.output else Path.cwd() / default_name

    with tempfile.TemporaryDirectory(prefix="example-factory-") as staging:
        if args.remote:
            config = await _materialise(config, entries, Path(staging), with_template=True)

        print_info(f"Creating {output} ...")
        if args.example:
            path, asset_set = await create_example_project(args.example, output, config, registry)
        else:
            path, asset_set = await create_category_project(args.category, output, config, registry)

    _report_diagnostics(asset_set)
    print_summary_table(
        {
            "Project": str(path),
            "Contracts": ", ".join(asset_set.contract_names),
            "Files": str(len(asset_set.files)),
            "Dependencies": ", ".join(asset_set.dependencies) or "-",
        },
        title="Project created",
    )
    print_success(f"Next steps: cd {path} && npm install && npx hardhat test")
    return path


async def cmd_add(
    args: argparse.Namespace, config: FactoryConfig, registry: ManifestRegistry
) -> InjectionSummary:
    entry = registry.lookup_example(args.example)
    if args.on_conflict == "ask":
        decide = prompt_policy(console)
    else:
        decide = fixed_policy(Decision(args.on_conflict))

    with tempfile.TemporaryDirectory(prefix="example-factory-") as staging:
        if args.remote:
            config = await _materialise(config, [entry], Path(staging), with_template=False)
        engine = InjectionEngine(config, registry, decide)
        summary = await engine.inject(args.target, entry.id)

    print_injection_summary(summary)
    return summary


async def _materialise(
    config: FactoryConfig, entries: list[ManifestEntry], staging: Path, with_template: bool
) -> FactoryConfig:
    """Download assets (and optionally the template) into *staging*."""
    remote = RemoteCatalog(config.remote)
    await remote.fetch_entries(entries, staging / "catalog")
    update: dict[str, object] = {"catalog_root": staging / "catalog"}
    if with_template:
        update["template_dir"] = await remote.clone_template(staging / "template")
    return config.model_copy(update=update)


def print_injection_summary(summary: InjectionSummary) -> None:
    for path in summary.created:
        console.print(f"  [green]Added[/green] {path}")
    for path in summary.overwritten:
        console.print(f"  [yellow]Overwritten[/yellow] {path}")
    for path in summary.skipped:
        console.print(f"  [dim]Skipped[/dim] {path}")
    for item in summary.renamed:
        console.print(f"  [cyan]Renamed[/cyan] {item.original} -> {item.renamed}")
    for path in summary.updated:
        console.print(f"  [blue]Updated[/blue] {path}")
    for item in summary.dependencies_updated:
        console.print(f"  [blue]Pinned[/blue] {item.name} {item.previous} -> {item.constraint}")
    for diagnostic in summary.diagnostics:
        print_warning(f"{diagnostic.kind.value}: {diagnostic.message}")
    console.print()

    print_summary_table(
        {
            "Target": str(summary.target),
            "Example": summary.entry_id,
            "State": summary.state.value,
            "Added": str(len(summary.created) + len(summary.renamed)),
            "Overwritten": str(len(summary.overwritten)),
            "Skipped": str(len(summary.skipped)),
            "Dependencies added": ", ".join(
                f"{name}@{version}" for name, version in summary.dependencies_added.items()
            ) or "-",
            "Dependencies updated": ", ".join(
                f"{item.name}@{item.constraint}" for item in summary.dependencies_updated
            ) or "-",
        },
        title="Injection summary",
    )
    if summary.dependencies_added or summary.dependencies_updated:
        print_info("Run 'npm install' to install the new dependencies.")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="example-factory",
        description="FHEVM Example Factory -- scaffold or inject FHEVM examples",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  example-factory list\n"
            "  example-factory create --example fhe-counter -o ./fhe-counter\n"
            "  example-factory create --category openzeppelin --remote\n"
            "  example-factory add --example fhe-add --target ./my-app --on-conflict rename\n"
        ),
    )
    parser.add_argument("--catalog-root", default=None, help="Directory catalog asset paths are relative to")
    parser.add_argument("--template-dir", default=None, help="Base Hardhat template directory")
    parser.add_argument("--catalog-file", default=None, help="YAML/JSON catalog replacing the built-in one")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available examples and categories")

    create = subparsers.add_parser("create", help="Create a new standalone project")
    source = create.add_mutually_exclusive_group(required=True)
    source.add_argument("--example", "-e", help="Example id to build")
    source.add_argument("--category", "-c", help="Category id to build")
    create.add_argument("--output", "-o", default=None, help="Output directory (must not exist)")
    create.add_argument("--remote", action="store_true", help="Download assets and template from GitHub")
    create.add_argument("--no-git", action="store_true", help="Do not run 'git init' in the new project")

    add = subparsers.add_parser("add", help="Add an example to an existing Hardhat project")
    add.add_argument("--example", "-e", required=True, help="Example id to add")
    add.add_argument("--target", "-t", default=".", help="Existing project directory (default: .)")
    add.add_argument(
        "--on-conflict",
        choices=["ask", "skip", "overwrite", "rename"],
        default="ask",
        help="What to do with files that already exist (default: ask)",
    )
    add.add_argument("--remote", action="store_true", help="Download assets from GitHub")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m example_factory``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
        registry = load_registry(config)
        if args.command == "list":
            cmd_list(registry)
        elif args.command == "create":
            asyncio.run(cmd_create(args, config, registry))
        else:
            asyncio.run(cmd_add(args, config, registry))
    except UnknownIdentifier as exc:
        _report_unknown(exc)
        sys.exit(1)
    except ApplyFailure as exc:
        print_error(f"Error: {exc}")
        if exc.__cause__ is not None:
            print_error(f"Cause: {exc.__cause__}")
        if exc.rollback_complete:
            print_warning("All changes were rolled back.")
        sys.exit(1)
    except (FactoryError, CatalogError) as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()

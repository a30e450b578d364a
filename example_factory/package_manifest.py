"""Reading, merging and writing the project's ``package.json``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from .utils import dump_canonical_json, load_json

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Load ``package.json``; a missing file yields an empty manifest."""
    path = Path(path)
    if not path.exists():
        return {}
    return load_json(path)


def render_manifest(data: Mapping[str, Any]) -> str:
    """Canonical text form: sorted keys, two-space indent, trailing newline."""
    return dump_canonical_json(dict(data))


def declared_constraint(data: Mapping[str, Any], package: str) -> str | None:
    """Version constraint of *package* from either dependency section, if any."""
    for section in DEPENDENCY_SECTIONS:
        constraint = (data.get(section) or {}).get(package)
        if constraint is not None:
            return constraint
    return None


def declares_package(data: Mapping[str, Any], package: str) -> bool:
    """True when *package* appears in ``dependencies`` or ``devDependencies``."""
    return declared_constraint(data, package) is not None


def apply_project_metadata(
    data: dict[str, Any],
    name: str,
    description: str = "",
    dependencies: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return a copy of *data* renamed for a freshly composed project.

    Resolved dependencies overwrite whatever the template declared for the
    same package; the template's other dependencies are kept.
    """
    result = dict(data)
    result["name"] = name
    if description:
        result["description"] = description
    if dependencies:
        result["dependencies"] = {**(result.get("dependencies") or {}), **dependencies}
    return result


def merge_missing(
    data: dict[str, Any],
    section: str,
    dependencies: Mapping[str, str],
) -> tuple[dict[str, Any], dict[str, str], dict[str, str]]:
    """Add *dependencies* that *section* does not declare yet.

    Packages already present in either dependency section are left at the
    project's own constraint.  Nothing is ever removed.

    Returns:
        ``(new_data, added, kept)`` where *kept* maps each skipped package to
        the constraint the project already had.
    """
    result = dict(data)
    merged = dict(result.get(section) or {})
    added: dict[str, str] = {}
    kept: dict[str, str] = {}
    for name, constraint in dependencies.items():
        existing = declared_constraint(result, name)
        if existing is None:
            merged[name] = constraint
            added[name] = constraint
        else:
            kept[name] = existing
    if added:
        result[section] = merged
    return result, added, kept


def pin_dependencies(
    data: dict[str, Any],
    section: str,
    dependencies: Mapping[str, str],
) -> tuple[dict[str, Any], dict[str, str], dict[str, str]]:
    """Set *dependencies* to the given constraints, replacing older ones.

    A package the project already declares is updated in whichever section
    declares it; anything else goes into *section*.  Nothing is removed.

    Returns:
        ``(new_data, added, replaced)`` where *replaced* maps each updated
        package to the constraint it had before.
    """
    result = dict(data)
    added: dict[str, str] = {}
    replaced: dict[str, str] = {}
    for name, constraint in dependencies.items():
        home = next(
            (s for s in DEPENDENCY_SECTIONS if name in (result.get(s) or {})),
            section,
        )
        current = dict(result.get(home) or {})
        previous = current.get(name)
        if previous == constraint:
            continue
        current[name] = constraint
        result[home] = current
        if previous is None:
            added[name] = constraint
        else:
            replaced[name] = previous
    return result, added, replaced

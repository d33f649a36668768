"""
Catalogue Loader (``qa_config.loader``).

Responsibility
--------------
Load the YAML catalogue of default check definitions and default setting
values and parse it into frozen ``CheckDefinition`` objects plus a settings
dict.  The catalogue seeds an empty store; at runtime the store, not this
file, is authoritative.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on
``qa_kernel.domain`` and ``qa_kernel.exceptions`` only.

Invariants enforced
-------------------
* Every tier is one of critical / important / recommended.
* Check keys are unique within a catalogue.
* Every parsed definition is a frozen dataclass.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML or wrong shape  -> ``CatalogueError``.
* Unknown tier  -> ``InvalidTierError``.
* Repeated check key  -> ``DuplicateCheckKeyError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from qa_kernel.domain.checks import CheckDefinition, CheckTier
from qa_kernel.domain.settings import default_setting_values
from qa_kernel.exceptions import CatalogueError, DuplicateCheckKeyError, InvalidTierError


@dataclass(frozen=True)
class Catalogue:
    """Parsed catalogue contents."""

    definitions: tuple[CheckDefinition, ...] = ()
    settings: dict[str, Any] = field(default_factory=dict)
    source: str = "<memory>"

    def definition(self, check_key: str) -> CheckDefinition | None:
        for definition in self.definitions:
            if definition.check_key == check_key:
                return definition
        return None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from ``path``.

    Raises:
        FileNotFoundError: if the file does not exist.
        CatalogueError: if the file is not valid YAML or not a mapping.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise CatalogueError(str(path), f"invalid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogueError(str(path), "top level must be a mapping")
    return data


def parse_tier(check_key: str, value: Any) -> CheckTier:
    try:
        return CheckTier(str(value).strip().lower())
    except ValueError:
        raise InvalidTierError(check_key, str(value)) from None


def parse_check_definition(data: dict[str, Any], sort_order: int = 0) -> CheckDefinition:
    """Parse one catalogue entry.

    ``sort_order`` is used when the entry does not set its own.

    Raises:
        CatalogueError: if ``key`` or ``tier`` is missing.
        InvalidTierError: if the tier is unknown.
    """
    if not isinstance(data, dict):
        raise CatalogueError("checks", f"entry must be a mapping, got {data!r}")
    check_key = data.get("key")
    if not check_key:
        raise CatalogueError("checks", f"entry without a key: {data!r}")
    if "tier" not in data:
        raise CatalogueError("checks", f"check {check_key} has no tier")

    categories = data.get("applicable_categories") or ()
    if isinstance(categories, str):
        categories = (categories,)

    return CheckDefinition(
        check_key=str(check_key),
        tier=parse_tier(str(check_key), data["tier"]),
        entity_type=data.get("entity_type", "material"),
        check_name=data.get("name", ""),
        description=data.get("description"),
        applicable_categories=frozenset(str(c) for c in categories),
        is_active=bool(data.get("active", True)),
        sort_order=int(data.get("sort_order", sort_order)),
    )


def parse_catalogue(data: dict[str, Any], source: str = "<memory>") -> Catalogue:
    """Parse a catalogue mapping with ``checks`` and ``settings`` sections.

    Settings not listed fall back to the built-in defaults.
    """
    raw_checks = data.get("checks") or []
    if not isinstance(raw_checks, list):
        raise CatalogueError(source, "'checks' must be a list")

    definitions: list[CheckDefinition] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_checks):
        definition = parse_check_definition(entry, sort_order=(index + 1) * 10)
        if definition.check_key in seen:
            raise DuplicateCheckKeyError(definition.check_key)
        seen.add(definition.check_key)
        definitions.append(definition)

    raw_settings = data.get("settings") or {}
    if not isinstance(raw_settings, dict):
        raise CatalogueError(source, "'settings' must be a mapping")
    settings = default_setting_values()
    settings.update(raw_settings)

    return Catalogue(definitions=tuple(definitions), settings=settings, source=source)


def load_catalogue(path: Path) -> Catalogue:
    """Load and parse a catalogue file."""
    return parse_catalogue(load_yaml_file(path), source=str(path))

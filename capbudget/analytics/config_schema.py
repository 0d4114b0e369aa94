from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

ValidatorFn = Callable[[Any], bool]
PathSpec = Tuple[str, ...]

_SCHEMA_COLUMNS = [
    "module",
    "name",
    "path_candidates",
    "required",
    "severity",
    "description",
]


@dataclass(frozen=True)
class RequiredFieldSpec:
    """
    Canonical description of a project config field.

    Attributes
    ----------
    module:
        Logical owner (e.g. "project").
    name:
        Logical key ("initial_investment", "discount_rate", ...).
    paths:
        Candidate YAML paths tried in order. Each path is a tuple of keys,
        e.g. ("rates", "discount_rate_pct").
    required:
        True = must be present and valid.
    severity:
        "error" or "warning" (warnings are reported but never block).
    description:
        Human-friendly explanation used in error messages / schema dumps.
    validator:
        Optional predicate returning True when the resolved value is valid.
        Optional fields are only validated when present.
    """

    module: str
    name: str
    paths: Sequence[PathSpec]
    required: bool = True
    severity: str = "error"
    description: str = ""
    validator: Optional[ValidatorFn] = field(default=None)


# Global registry keyed by module name
_REGISTRY: Dict[str, List[RequiredFieldSpec]] = {}


def register_required_fields(
    module: str,
    specs: Iterable[RequiredFieldSpec],
) -> None:
    """
    Register one or more RequiredFieldSpec objects for a module.

    Registering the same (module, name) twice replaces the earlier spec, so
    re-importing a module does not duplicate entries.
    """
    current = _REGISTRY.setdefault(module, [])
    for spec in specs:
        current[:] = [s for s in current if s.name != spec.name]
        current.append(spec)


def get_required_fields(module: Optional[str] = None) -> List[RequiredFieldSpec]:
    """Return registered specs, optionally filtered by module."""
    if module is None:
        out: List[RequiredFieldSpec] = []
        for specs in _REGISTRY.values():
            out.extend(specs)
        return out
    return list(_REGISTRY.get(module, []))


def build_schema_dataframe(module: Optional[str] = None) -> pd.DataFrame:
    """Registered config fields as a table, sorted by module then name.

    ``path_candidates`` lists the accepted key paths in lookup order, dotted.
    """
    df = pd.DataFrame(
        [
            (
                s.module,
                s.name,
                [".".join(p) for p in s.paths],
                s.required,
                s.severity,
                s.description,
            )
            for s in get_required_fields(module)
        ],
        columns=_SCHEMA_COLUMNS,
    )
    return df.sort_values(["module", "name"], ignore_index=True)


__all__ = [
    "RequiredFieldSpec",
    "register_required_fields",
    "get_required_fields",
    "build_schema_dataframe",
    "ValidatorFn",
    "PathSpec",
]

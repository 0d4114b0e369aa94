"""
Schema guard for project configs.

This module sits on top of capbudget.analytics.config_schema and:
  * lazily imports the modules that register field specs so that their
    registration side-effects run; and
  * validates a raw config dict against all registered field specs.

Usage::

    from capbudget.analytics.schema_guard import validate_project_config

    validate_project_config(
        raw_config=config,
        config_path="scenarios/sample_project.yaml",
    )
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, List, Mapping, Sequence

from capbudget.analytics.config_schema import PathSpec, get_required_fields

logger = logging.getLogger(__name__)


class ConfigValidationError(RuntimeError):
    """Raised when a YAML / JSON config is missing required fields."""


# Logical module name -> import path
_MODULE_IMPORTS: Dict[str, str] = {
    "project": "capbudget.analytics.project_loader",
}


def _ensure_module_registered(name: str) -> None:
    """Import the module owning `name` so its specs are registered; unknown names are a no-op."""
    module_path = _MODULE_IMPORTS.get(name)
    if not module_path:
        return
    importlib.import_module(module_path)


def _get_nested(container: Mapping[str, Any], path: PathSpec) -> Any:
    """Value at the end of `path`, or None if any segment is missing."""
    current: Any = container
    for seg in path:
        if not isinstance(current, Mapping) or seg not in current:
            return None
        current = current[seg]
    return current


def resolve_field(raw_config: Mapping[str, Any], paths: Sequence[PathSpec]) -> Any:
    """
    Try each candidate path in order and return the first resolved value.

    Each path is a tuple like ("project", "initial_investment").
    """
    for path in paths:
        if not path:
            continue
        parent = _get_nested(raw_config, path[:-1])
        if parent is not None and isinstance(parent, Mapping) and path[-1] in parent:
            return parent[path[-1]]
    return None


def validate_project_config(
    raw_config: Dict[str, Any],
    config_path: str,
    modules: Sequence[str] = ("project",),
) -> None:
    """
    Validate a raw YAML/JSON config against the registered field specs.

    Args:
        raw_config: The configuration dict loaded from YAML/JSON.
        config_path: Identifier used in error messages (usually the file path).
        modules: Logical module names whose specs apply.

    Raises:
        ConfigValidationError: if any error-severity field is missing or invalid.
    """
    for m in modules:
        _ensure_module_registered(m)

    specs = []
    for m in modules:
        specs.extend(get_required_fields(m))

    if not specs:
        return

    problems: List[str] = []

    for spec in specs:
        val = resolve_field(raw_config, spec.paths)
        ok = True

        if val is None:
            ok = not spec.required
        elif spec.validator is not None:
            try:
                ok = bool(spec.validator(val))
            except (TypeError, ValueError):
                ok = False

        if ok:
            continue

        path_labels = [".".join(p) for p in spec.paths] or ["<no paths registered>"]
        message = f"{spec.name} (paths: {', '.join(path_labels)})"
        if str(spec.severity).lower() != "error":
            logger.warning("Config '%s': %s is missing or invalid", config_path, message)
            continue
        problems.append(message)

    if problems:
        details = "; ".join(sorted(problems))
        raise ConfigValidationError(
            f"Config '{config_path}' is missing or has invalid required fields: {details}"
        )


__all__ = [
    "ConfigValidationError",
    "resolve_field",
    "validate_project_config",
]

"""Check catalog and the registry that builds the ordered check list for a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from thriftlint.checks.constants import check_constant_ref
from thriftlint.checks.containers import (
    check_map_key_type,
    check_map_value_disallowed,
    check_set_value_type,
)
from thriftlint.checks.enums import check_enum_size
from thriftlint.checks.fields import (
    check_field_id_missing,
    check_field_id_negative,
    check_field_id_zero,
)
from thriftlint.checks.imports import (
    CycleInvariantError,
    ImportGraph,
    check_import_cycles,
    finalize_import_graph,
    find_cycle,
)
from thriftlint.checks.includes import check_include_restricted
from thriftlint.checks.names import check_names_reserved, check_namespace_patterns
from thriftlint.checks.types import check_types_disallowed

if TYPE_CHECKING:
    from thriftlint.config import Config
    from thriftlint.engine.check import Check


def all_checks(config: Config) -> list[Check]:
    """Instantiate every known check, configured from *config*, in registration order."""
    return [
        check_constant_ref(),
        check_enum_size(warning=config.enum_size.warning, error=config.enum_size.error),
        check_field_id_missing(),
        check_field_id_negative(),
        check_field_id_zero(),
        check_include_restricted(config.include_restricted),
        check_map_key_type(),
        check_map_value_disallowed(config.map_value_disallowed),
        check_names_reserved(config.names_reserved),
        check_namespace_patterns(config.namespace_patterns),
        check_set_value_type(),
        check_types_disallowed(config.types_disallowed),
        check_import_cycles(),
    ]


def build_checks(config: Config) -> list[Check]:
    """Return the enabled checks for one run.

    Every call returns fresh instances, so multi-file state never leaks
    between runs.
    """
    return [check for check in all_checks(config) if config.is_enabled(check.rule_id)]


__all__ = [
    "CycleInvariantError",
    "ImportGraph",
    "all_checks",
    "build_checks",
    "check_constant_ref",
    "check_enum_size",
    "check_field_id_missing",
    "check_field_id_negative",
    "check_field_id_zero",
    "check_import_cycles",
    "check_include_restricted",
    "check_map_key_type",
    "check_map_value_disallowed",
    "check_names_reserved",
    "check_namespace_patterns",
    "check_set_value_type",
    "check_types_disallowed",
    "finalize_import_graph",
    "find_cycle",
]

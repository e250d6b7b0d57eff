"""Configuration: parse thriftlint.yml into a validated :class:`Config`."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_NAMES: tuple[str, ...] = ("thriftlint.yml", ".thriftlint.yml")

DEFAULT_ENUM_SIZE_WARNING = 500
DEFAULT_ENUM_SIZE_ERROR = 1000

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when the configuration file is malformed."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EnumSizeLimits:
    warning: int | None = DEFAULT_ENUM_SIZE_WARNING
    error: int | None = DEFAULT_ENUM_SIZE_ERROR


@dataclass(frozen=True)
class Config:
    """Validated configuration for one run."""

    includes: tuple[str, ...] = ()
    enabled: tuple[str, ...] = ()
    disabled: tuple[str, ...] = ()
    enum_size: EnumSizeLimits = field(default_factory=EnumSizeLimits)
    include_restricted: tuple[tuple[str, str], ...] = ()  # (file glob, include regex)
    map_value_disallowed: tuple[str, ...] = ()
    names_reserved: tuple[str, ...] = ()
    namespace_patterns: tuple[tuple[str, str], ...] = ()  # (scope, name regex)
    types_disallowed: tuple[str, ...] = ()
    source: Path | None = None

    def is_enabled(self, rule_id: str) -> bool:
        """Return True if *rule_id* should run.

        Entries in ``enabled``/``disabled`` are dotted prefixes (``"names"``
        matches ``names.reserved``).  The longest matching prefix decides; on a
        tie ``disabled`` wins.  Rules matched by neither list are enabled.
        """
        best_length = -1
        enabled = True
        for prefix in self.enabled:
            if _prefix_matches(rule_id, prefix) and len(prefix) > best_length:
                best_length, enabled = len(prefix), True
        for prefix in self.disabled:
            if _prefix_matches(rule_id, prefix) and len(prefix) >= best_length:
                best_length, enabled = len(prefix), False
        return enabled


def _prefix_matches(rule_id: str, prefix: str) -> bool:
    return rule_id == prefix or rule_id.startswith(prefix + ".")


# ---------------------------------------------------------------------------
# YAML parsing
# ---------------------------------------------------------------------------


def _string_list(value: object, context: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        msg = f"{context} must be a list"
        raise ConfigError(msg)
    return tuple(str(item) for item in value)


def _mapping(value: object, context: str) -> dict[str, object]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"{context} must be a mapping"
        raise ConfigError(msg)
    return {str(k): v for k, v in value.items()}


def _regex_pairs(value: object, context: str) -> tuple[tuple[str, str], ...]:
    """Parse ``{key: regex}`` or ``[{key: regex}, ...]`` into validated pairs."""
    if value is None:
        return ()
    entries = value if isinstance(value, list) else [value]
    pairs: list[tuple[str, str]] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            msg = f"{context}: entry at index {idx} must be a mapping"
            raise ConfigError(msg)
        for key, pattern in entry.items():
            pattern_str = str(pattern)
            try:
                re.compile(pattern_str)
            except re.error as exc:
                msg = f"{context}: invalid regular expression '{pattern_str}' for '{key}': {exc}"
                raise ConfigError(msg) from exc
            pairs.append((str(key), pattern_str))
    return tuple(pairs)


def _limit(value: object, context: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{context} must be an integer"
        raise ConfigError(msg)
    if value < 0:
        msg = f"{context} must be non-negative"
        raise ConfigError(msg)
    return value


def _parse_enum_size(checks: dict[str, object]) -> EnumSizeLimits:
    enum_data = _mapping(checks.get("enum"), "checks.enum")
    if "size" not in enum_data:
        return EnumSizeLimits()
    size_data = _mapping(enum_data.get("size"), "checks.enum.size")
    return EnumSizeLimits(
        warning=_limit(size_data.get("warning"), "checks.enum.size.warning"),
        error=_limit(size_data.get("error"), "checks.enum.size.error"),
    )


def parse_config(data: object, *, source: Path | None = None) -> Config:
    """Validate an already-loaded YAML document and build a :class:`Config`.

    Raises :class:`ConfigError` on schema errors.
    """
    if data is None:
        return Config(source=source)
    if not isinstance(data, dict):
        msg = "configuration must be a YAML mapping"
        raise ConfigError(msg)

    checks = _mapping(data.get("checks"), "checks")
    include_data = _mapping(checks.get("include"), "checks.include")
    map_data = _mapping(checks.get("map"), "checks.map")
    map_value = _mapping(map_data.get("value"), "checks.map.value")
    names_data = _mapping(checks.get("names"), "checks.names")
    namespace_data = _mapping(checks.get("namespace"), "checks.namespace")
    types_data = _mapping(checks.get("types"), "checks.types")

    return Config(
        includes=_string_list(data.get("includes"), "includes"),
        enabled=_string_list(checks.get("enabled"), "checks.enabled"),
        disabled=_string_list(checks.get("disabled"), "checks.disabled"),
        enum_size=_parse_enum_size(checks),
        include_restricted=_regex_pairs(
            include_data.get("restricted"), "checks.include.restricted"
        ),
        map_value_disallowed=_string_list(
            map_value.get("disallowed"), "checks.map.value.disallowed"
        ),
        names_reserved=_string_list(names_data.get("reserved"), "checks.names.reserved"),
        namespace_patterns=_regex_pairs(
            namespace_data.get("patterns"), "checks.namespace.patterns"
        ),
        types_disallowed=_string_list(types_data.get("disallowed"), "checks.types.disallowed"),
        source=source,
    )


def find_config(directory: Path) -> Path | None:
    """Return the first default-named config file in *directory*, if any."""
    for name in DEFAULT_CONFIG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, *, search_dir: Path | None = None) -> Config:
    """Load configuration from *path*, or from a default file in *search_dir*.

    Falls back to the defaults when no file is given or found.  Raises
    :class:`ConfigError` if the file is unreadable or invalid.
    """
    if path is None:
        path = find_config(search_dir or Path.cwd())
        if path is None:
            logger.debug("No configuration file found, using defaults")
            return Config()

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        msg = f"{path}: cannot read configuration: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"{path}: invalid YAML: {exc}"
        raise ConfigError(msg) from exc

    try:
        config = parse_config(data, source=path)
    except ConfigError as exc:
        msg = f"{path}: {exc}"
        raise ConfigError(msg) from exc

    logger.debug("Loaded configuration from %s", path)
    return config

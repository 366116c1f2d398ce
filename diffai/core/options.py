"""Diff options model and the host → engine option translator.

``build_diff_options`` turns loosely-typed host configuration into a frozen
``DiffOptions``.  Everything that can fail (regex compilation, format
parsing, field types) fails here, before any engine work starts.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from diffai.core.schemas import OPTIONS_SCHEMA, schema_errors
from diffai.errors import InvalidConfiguration

logger = logging.getLogger("diffai.options")


class OutputFormat(str, Enum):
    """Output formats supported by the formatter."""

    DIFFAI = "diffai"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, name: str) -> OutputFormat:
        """Parse a format name, case-insensitively.

        Raises:
            ValueError: If *name* is not a supported format.
        """
        key = str(name).strip().lower()
        if key in cls._value2member_map_:
            return cls(key)
        raise ValueError(
            f"Unsupported format '{name}'. Valid formats: {', '.join(m.value for m in cls)}"
        )


@dataclass(frozen=True)
class DiffOptions:
    """Validated options handed to the engine.

    Attributes:
        epsilon: Absolute tolerance for numeric comparison.
        array_id_key: Field used to align list elements that are mappings.
        ignore_keys_regex: Compiled pattern; matching key names are skipped.
        path_filter: Only results whose path contains this substring are kept.
        output_format: Preferred output format.
    """

    epsilon: float | None = None
    array_id_key: str | None = None
    ignore_keys_regex: re.Pattern[str] | None = None
    path_filter: str | None = None
    output_format: OutputFormat | None = None


@dataclass
class HostOptions:
    """Host-side configuration: every field optional, nothing validated."""

    epsilon: float | None = None
    array_id_key: str | None = None
    ignore_keys_regex: str | None = None
    path_filter: str | None = None
    output_format: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_CAMEL_OPTION_KEYS = {
    "arrayIdKey": "array_id_key",
    "ignoreKeysRegex": "ignore_keys_regex",
    "pathFilter": "path_filter",
    "outputFormat": "output_format",
}


def build_diff_options(config: HostOptions | Mapping[str, Any] | None) -> DiffOptions | None:
    """Translate host configuration into ``DiffOptions``.

    ``None`` means "engine defaults" and is passed through as ``None``.

    Raises:
        InvalidConfiguration: Bad field type, unknown key, invalid regex, or
            unknown output format.
    """
    if config is None:
        return None

    if isinstance(config, HostOptions):
        data = config.to_dict()
    elif isinstance(config, Mapping):
        data = {_CAMEL_OPTION_KEYS.get(k, k): v for k, v in config.items()}
    else:
        raise InvalidConfiguration(
            f"Options must be a mapping or HostOptions, got {type(config).__name__}"
        )

    errors = schema_errors(data, OPTIONS_SCHEMA)
    if errors:
        raise InvalidConfiguration("Invalid options: " + "; ".join(errors))

    ignore_keys_regex = None
    pattern = data.get("ignore_keys_regex")
    if pattern is not None:
        try:
            ignore_keys_regex = re.compile(pattern)
        except re.error as exc:
            raise InvalidConfiguration(f"Invalid regex: {exc}") from exc

    output_format = None
    format_name = data.get("output_format")
    if format_name is not None:
        try:
            output_format = OutputFormat.parse(format_name)
        except ValueError as exc:
            raise InvalidConfiguration(f"Invalid output format: {exc}") from exc

    options = DiffOptions(
        epsilon=data.get("epsilon"),
        array_id_key=data.get("array_id_key"),
        ignore_keys_regex=ignore_keys_regex,
        path_filter=data.get("path_filter"),
        output_format=output_format,
    )
    logger.debug("Translated options: %s", options)
    return options

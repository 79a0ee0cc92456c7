from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import yaml

from cron_builder.core.errors import CronLoadError


# suffix -> (parser, error code used when the parser fails)
_PARSERS: dict[str, tuple[Callable[[str], Any], str]] = {
    ".yaml": (yaml.safe_load, "E_YAML_PARSE"),
    ".yml": (yaml.safe_load, "E_YAML_PARSE"),
    ".json": (json.loads, "E_JSON_PARSE"),
}


def load_expression(path: str) -> dict[str, Any]:
    """Load a structured expression (field -> values) from a YAML/JSON file.

    A field may hold a list, a comma separated string or a bare integer; all
    three come back as a list. Field names and token legality are left to
    `validate_expression`.
    """

    source = Path(path)
    if not source.is_file():
        raise CronLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=str(source))

    parser = _PARSERS.get(source.suffix.lower())
    if parser is None:
        raise CronLoadError(
            code="E_UNSUPPORTED_FORMAT",
            message=f"supported formats are {', '.join(sorted(_PARSERS))}",
            file=str(source),
        )

    parse, parse_error_code = parser
    try:
        document = parse(source.read_text(encoding="utf-8"))
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise CronLoadError(code=parse_error_code, message=str(e), file=str(source)) from e

    if not isinstance(document, dict):
        raise CronLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping of field -> values",
            file=str(source),
        )

    return {field: _as_tokens(value) for field, value in document.items()}


def _as_tokens(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return [str(value)]
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, list):
        return [str(v) if isinstance(v, int) and not isinstance(v, bool) else v for v in value]
    return value

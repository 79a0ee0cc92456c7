from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class BuildOptions:
    plain: bool = True
    output_weekday_names: bool = False
    output_month_names: bool = False
    output_hashes: bool = False

    def as_kwargs(self) -> dict[str, bool]:
        return asdict(self)


DEFAULT_OPTIONS = BuildOptions()

OPTION_NAMES: tuple[str, ...] = tuple(f.name for f in fields(BuildOptions))


class OptionsConfigError(ValueError):
    pass


def load_options_file(path: str | Path) -> dict[str, bool]:
    """Load build options from a YAML file.

    Format:
      plain: false
      output_weekday_names: true

    Returns only the keys present in the file; merging fills in the rest.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise OptionsConfigError("options file must be a mapping of option -> bool")

    out: dict[str, bool] = {}
    for k, v in raw.items():
        if k not in OPTION_NAMES:
            raise OptionsConfigError(
                f"unknown option '{k}' (choose from: {', '.join(OPTION_NAMES)})"
            )
        if not isinstance(v, bool):
            raise OptionsConfigError(f"option '{k}' must be true or false")
        out[k] = v
    return out


def merged_options(overrides: dict[str, Any] | None = None) -> BuildOptions:
    """Return DEFAULT_OPTIONS with overrides applied. `None` values are skipped."""
    if not overrides:
        return DEFAULT_OPTIONS
    return replace(DEFAULT_OPTIONS, **{k: v for k, v in overrides.items() if v is not None})


def load_and_merge(options_file: str | None) -> BuildOptions:
    if not options_file:
        return merged_options()
    return merged_options(load_options_file(options_file))

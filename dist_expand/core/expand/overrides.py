"""Site overrides for the variable catalog.

A deployment may need a bigger heap or different paths without touching the
built-in catalog. Overrides are read from a YAML file and merged over it.
"""
from __future__ import annotations

from pathlib import Path
import yaml

from dist_expand.core.expand.catalog import CATALOG
from dist_expand.core.model import LiteralValue, PerFormatValue, VariableSpec, VariableValue


class OverrideConfigError(ValueError):
    pass


def load_override_file(path: str | Path) -> dict[str, VariableValue]:
    """Load variable overrides from a YAML file.

    Format:
      <name>: "value"               # same value for every format
      <name>:                       # per-format values
        deb: "..."
        rpm: "..."
        default: "..."              # `def` is accepted too

    Scalars keep their source text: `7.10` stays "7.10" and `0022` stays
    "0022", so versions, umasks and JVM flags need no quoting.

    Returns a mapping of variable name -> value.
    """
    p = Path(path)
    try:
        raw = yaml.load(p.read_text(encoding="utf-8"), Loader=yaml.BaseLoader)
    except UnicodeDecodeError as e:
        raise OverrideConfigError("override file is not valid UTF-8 text") from e
    except yaml.YAMLError as e:
        raise OverrideConfigError(f"override file is not valid YAML: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise OverrideConfigError("override file must be a mapping of name -> value")

    out: dict[str, VariableValue] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not k.strip():
            raise OverrideConfigError("variable names must be non-empty strings")
        name = k.strip()
        if isinstance(v, dict):
            if not v:
                raise OverrideConfigError(f"variable '{name}' must not be an empty mapping")
            values: dict[str, str] = {}
            for fmt, fv in v.items():
                if not isinstance(fmt, str) or not fmt.strip():
                    raise OverrideConfigError(f"variable '{name}' format keys must be non-empty strings")
                if not isinstance(fv, str):
                    raise OverrideConfigError(
                        f"variable '{name}' value for '{fmt}' must be a scalar"
                    )
                values[fmt.strip()] = fv
            try:
                out[name] = PerFormatValue(values)
            except ValueError as e:
                raise OverrideConfigError(f"variable '{name}': {e}") from e
        elif isinstance(v, str):
            out[name] = LiteralValue(v)
        else:
            raise OverrideConfigError(
                f"variable '{name}' must be a scalar or mapping of format -> value"
            )
    return out


def merged_catalog(overrides: dict[str, VariableValue] | None = None) -> tuple[VariableSpec, ...]:
    """Return CATALOG with optional overrides applied.

    Overrides replace variables of the same name in place and may add new
    ones at the end. Override values are taken verbatim (no interpolation).
    """
    if not overrides:
        return CATALOG
    pending = dict(overrides)
    merged: list[VariableSpec] = []
    for spec in CATALOG:
        if spec.name in pending:
            merged.append(VariableSpec(spec.name, pending.pop(spec.name)))
        else:
            merged.append(spec)
    for name, value in pending.items():
        merged.append(VariableSpec(name, value))
    return tuple(merged)


def load_and_merge(override_file: str | None) -> tuple[VariableSpec, ...]:
    if not override_file:
        return merged_catalog()
    return merged_catalog(load_override_file(override_file))

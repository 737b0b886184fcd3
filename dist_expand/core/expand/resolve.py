from __future__ import annotations

from typing import Iterable, Optional

from dist_expand.core.expand.catalog import CATALOG, FOOTER_TEMPLATE
from dist_expand.core.model import DEFAULT, LiteralValue, PerFormatValue, VariableSpec, VariableValue
from dist_expand.logging import get_logger

logger = get_logger(__name__)


def resolve(
    distribution: str,
    package_name: str,
    package_version: str,
    catalog: Iterable[VariableSpec] = CATALOG,
) -> dict[str, str]:
    """Return the expansion table for one distribution format.

    Each variable resolves independently:

    - a literal value applies to every format unchanged
    - a per-format value uses the entry for `distribution`, falling back to
      the `default` entry
    - a per-format value with neither entry is omitted from the table, so
      templates referencing it keep their placeholder

    Unknown formats are not rejected; they simply resolve through `default`.
    The catalog is only read, and a new dict is returned on every call.
    """

    context = {
        "name": package_name,
        "version": package_version,
        "distribution": distribution,
    }
    context["footer"] = FOOTER_TEMPLATE.format_map(context)

    out: dict[str, str] = {}
    for spec in catalog:
        value = resolve_value(spec.value, distribution)
        if value is None:
            logger.debug("omitting %s: no value for %s and no default", spec.name, distribution)
            continue
        if spec.interpolate:
            value = value.format_map(context)
        out[spec.name] = value
    return out


def resolve_value(value: VariableValue, distribution: str) -> Optional[str]:
    if isinstance(value, LiteralValue):
        return value.value
    if isinstance(value, PerFormatValue):
        found = value.get(distribution)
        if found is None:
            found = value.get(DEFAULT)
        return found
    raise TypeError(f"unsupported variable value: {value!r}")


def resolve_all(
    distributions: Iterable[str],
    package_name: str,
    package_version: str,
    catalog: Iterable[VariableSpec] = CATALOG,
) -> dict[str, dict[str, str]]:
    specs = tuple(catalog)
    return {d: resolve(d, package_name, package_version, specs) for d in distributions}

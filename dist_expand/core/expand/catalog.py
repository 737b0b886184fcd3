"""Built-in variable catalog.

These are the values substituted into the bin scripts (bin/elasticsearch,
bin/elasticsearch-plugin, ...), the default config files and the package
maintainer scripts (postinst, init.d, ...).

  project.name / project.version
      Name and version of the project, sprinkled throughout the scripts.
  path.conf
      Default directory configuration is loaded from. /etc/elasticsearch for
      the OS packages, $ES_HOME/config otherwise.
  path.env / source.path.env
      The env file sourced before bin/elasticsearch starts. Archives have no
      such file, so they get a conditional default of ES_PATH_CONF instead.
  heap.min / heap.max
      Default min and max heap.
  scripts.footer
      Cosmetic footer appended to control scripts.
  stopping.timeout
      How long the RPM init script waits for the process to stop. One day.
      DEB retries forever, so it has no value.
"""
from __future__ import annotations

from dist_expand.core.model import DEB, DEFAULT, RPM, LiteralValue, PerFormatValue, VariableSpec


DEFAULT_HEAP_SIZE = "1g"
PATH_LOGS = "/var/log/elasticsearch"
PACKAGING_PATH_DATA = "path.data: /var/lib/elasticsearch"
PACKAGING_PATH_LOGS = f"path.logs: {PATH_LOGS}"
PACKAGING_LOGGC = f"{PATH_LOGS}/gc.log"
ARCHIVE_PATH_CONF = 'if [ -z "$ES_PATH_CONF" ]; then ES_PATH_CONF="$ES_HOME"/config; fi'

FOOTER_TEMPLATE = "# Built for {name}-{version} ({distribution})"


def _packaged(packaged: str, archive: str) -> PerFormatValue:
    """Same value for both OS packages, a different one for archives."""
    return PerFormatValue({DEB: packaged, RPM: packaged, DEFAULT: archive})


CATALOG: tuple[VariableSpec, ...] = (
    VariableSpec("project.name", LiteralValue("{name}"), interpolate=True),
    VariableSpec("project.version", LiteralValue("{version}"), interpolate=True),
    VariableSpec("path.conf", _packaged("/etc/elasticsearch", '"$ES_HOME"/config')),
    VariableSpec("path.data", _packaged(PACKAGING_PATH_DATA, "#path.data: /path/to/data")),
    VariableSpec(
        "path.env",
        PerFormatValue(
            {
                DEB: "/etc/default/elasticsearch",
                RPM: "/etc/sysconfig/elasticsearch",
                DEFAULT: ARCHIVE_PATH_CONF,
            }
        ),
    ),
    VariableSpec(
        "source.path.env",
        PerFormatValue(
            {
                DEB: "source /etc/default/elasticsearch",
                RPM: "source /etc/sysconfig/elasticsearch",
                DEFAULT: ARCHIVE_PATH_CONF,
            }
        ),
    ),
    VariableSpec("path.logs", _packaged(PACKAGING_PATH_LOGS, "#path.logs: /path/to/logs")),
    VariableSpec("loggc", _packaged(PACKAGING_LOGGC, "logs/gc.log")),
    VariableSpec("heap.min", LiteralValue(DEFAULT_HEAP_SIZE)),
    VariableSpec("heap.max", LiteralValue(DEFAULT_HEAP_SIZE)),
    VariableSpec(
        "heap.dump.path",
        _packaged("-XX:HeapDumpPath=/var/lib/elasticsearch", "#-XX:HeapDumpPath=/heap/dump/path"),
    ),
    VariableSpec(
        "error.file",
        _packaged(
            "-XX:ErrorFile=/var/log/elasticsearch/hs_err_pid%p.log",
            "#-XX:ErrorFile=/error/file/path",
        ),
    ),
    VariableSpec("stopping.timeout", PerFormatValue({RPM: "86400"})),
    # Debian maintainer scripts need `exit 0` before the decorative footer.
    VariableSpec(
        "scripts.footer",
        PerFormatValue({DEB: "exit 0\n{footer}", DEFAULT: "{footer}"}),
        interpolate=True,
    ),
)

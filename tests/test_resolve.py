from concurrent.futures import ThreadPoolExecutor

import pytest

from dist_expand.core.expand.catalog import CATALOG
from dist_expand.core.expand.resolve import resolve, resolve_all
from dist_expand.core.model import LiteralValue, PerFormatValue, VariableSpec


FORMATS = ["deb", "rpm", "default"]


@pytest.mark.parametrize("fmt", FORMATS)
def test_literals_are_format_independent(fmt: str):
    got = resolve(fmt, "elasticsearch", "7.0.0")
    assert got["heap.min"] == "1g"
    assert got["heap.max"] == "1g"
    assert got["project.name"] == "elasticsearch"
    assert got["project.version"] == "7.0.0"


def test_deb_footer_has_exit_0():
    got = resolve("deb", "elasticsearch", "7.0.0")
    assert got["scripts.footer"] == "exit 0\n# Built for elasticsearch-7.0.0 (deb)"


def test_rpm_footer_falls_back_to_default_entry():
    got = resolve("rpm", "elasticsearch", "7.0.0")
    assert got["scripts.footer"] == "# Built for elasticsearch-7.0.0 (rpm)"


def test_footer_names_the_requested_format():
    got = resolve("tar", "elasticsearch", "7.0.0")
    assert got["scripts.footer"] == "# Built for elasticsearch-7.0.0 (tar)"


def test_stopping_timeout_only_for_rpm():
    assert resolve("rpm", "elasticsearch", "7.0.0")["stopping.timeout"] == "86400"
    assert "stopping.timeout" not in resolve("default", "elasticsearch", "7.0.0")
    assert "stopping.timeout" not in resolve("deb", "elasticsearch", "7.0.0")


def test_packaged_paths():
    deb = resolve("deb", "elasticsearch", "7.0.0")
    rpm = resolve("rpm", "elasticsearch", "7.0.0")
    assert deb["path.conf"] == rpm["path.conf"] == "/etc/elasticsearch"
    assert deb["path.env"] == "/etc/default/elasticsearch"
    assert rpm["path.env"] == "/etc/sysconfig/elasticsearch"
    assert deb["source.path.env"] == "source /etc/default/elasticsearch"
    assert rpm["source.path.env"] == "source /etc/sysconfig/elasticsearch"
    assert deb["loggc"] == "/var/log/elasticsearch/gc.log"
    assert rpm["error.file"] == "-XX:ErrorFile=/var/log/elasticsearch/hs_err_pid%p.log"


def test_archive_path_env_is_a_conditional_default():
    got = resolve("default", "elasticsearch", "7.0.0")
    expected = 'if [ -z "$ES_PATH_CONF" ]; then ES_PATH_CONF="$ES_HOME"/config; fi'
    assert got["source.path.env"] == expected
    assert got["path.env"] == expected
    assert got["path.env"].endswith("; fi")
    assert got["path.conf"] == '"$ES_HOME"/config'
    assert got["path.data"] == "#path.data: /path/to/data"


def test_unknown_format_uses_default_entries():
    got = resolve("msi", "elasticsearch", "7.0.0")
    default = resolve("default", "elasticsearch", "7.0.0")

    assert "stopping.timeout" not in got
    for key, value in default.items():
        if key == "scripts.footer":
            continue
        assert got[key] == value
    assert got["scripts.footer"] == "# Built for elasticsearch-7.0.0 (msi)"


def test_resolve_is_idempotent():
    a = resolve("deb", "elasticsearch", "7.0.0")
    b = resolve("deb", "elasticsearch", "7.0.0")
    assert a == b
    assert a is not b


def test_resolve_does_not_share_state_between_calls():
    a = resolve("rpm", "elasticsearch", "7.0.0")
    a["heap.min"] = "31g"
    assert resolve("rpm", "elasticsearch", "7.0.0")["heap.min"] == "1g"


def test_output_keeps_catalog_order():
    got = resolve("rpm", "elasticsearch", "7.0.0")
    assert list(got) == [s.name for s in CATALOG]


def test_missing_both_entries_omits_variable():
    catalog = (
        VariableSpec("win.only", PerFormatValue({"msi": "x"})),
        VariableSpec("plain", LiteralValue("y")),
    )
    assert resolve("deb", "n", "1", catalog) == {"plain": "y"}
    assert resolve("msi", "n", "1", catalog) == {"win.only": "x", "plain": "y"}


def test_def_alias_is_default():
    catalog = (VariableSpec("p", PerFormatValue({"deb": "a", "def": "b"})),)
    assert resolve("rpm", "n", "1", catalog) == {"p": "b"}


def test_package_name_with_braces_is_not_reformatted():
    got = resolve("rpm", "es-{x}", "1.0")
    assert got["project.name"] == "es-{x}"
    assert got["scripts.footer"] == "# Built for es-{x}-1.0 (rpm)"


def test_omission_is_logged(caplog):
    caplog.set_level("DEBUG", logger="dist_expand")
    resolve("deb", "elasticsearch", "7.0.0")
    assert any("omitting stopping.timeout" in r.getMessage() for r in caplog.records)


def test_resolve_all():
    got = resolve_all(FORMATS, "elasticsearch", "7.0.0")
    assert list(got) == FORMATS
    assert got["deb"] == resolve("deb", "elasticsearch", "7.0.0")


def test_concurrent_resolution_matches_serial():
    formats = FORMATS * 20
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda f: (f, resolve(f, "elasticsearch", "7.0.0")), formats))
    for fmt, table in results:
        assert table == resolve(fmt, "elasticsearch", "7.0.0")

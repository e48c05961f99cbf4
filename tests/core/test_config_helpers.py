from __future__ import annotations

import stat

import pytest

from jusmind.core.config import (
    ConfigError,
    load_toml,
    merge_defaults,
    write_toml_template,
)


def test_load_toml_reads_document(tmp_path):
    path = tmp_path / "a.toml"
    path.write_text('[chat]\ndefault_mode = "socratic"\n', encoding="utf-8")
    assert load_toml(path) == {"chat": {"default_mode": "socratic"}}


def test_load_toml_missing_and_invalid(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_toml(tmp_path / "missing.toml")
    bad = tmp_path / "bad.toml"
    bad.write_text("[chat\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="parse"):
        load_toml(bad)


def test_merge_defaults_overrides_nested_values():
    base = {"a": {"b": 1, "c": 2}, "d": 3}

    merged = merge_defaults(base, {"a": {"c": 5}})

    assert merged == {"a": {"b": 1, "c": 5}, "d": 3}
    assert base == {"a": {"b": 1, "c": 2}, "d": 3}


def test_merge_defaults_rejects_unknown_keys_with_dotted_path():
    with pytest.raises(ConfigError, match="'a.zzz'"):
        merge_defaults({"a": {"b": 1}}, {"a": {"zzz": 1}})


def test_merge_defaults_rejects_scalar_for_table():
    with pytest.raises(ConfigError, match="Expected table for 'a'"):
        merge_defaults({"a": {"b": 1}}, {"a": 3})


def test_merge_defaults_rejects_table_for_scalar():
    with pytest.raises(ConfigError, match="Expected value for 'a.b'"):
        merge_defaults({"a": {"b": 1}}, {"a": {"b": {"c": 2}}})


def test_write_toml_template_respects_overwrite(tmp_path):
    path = tmp_path / "nested" / "cfg.toml"
    write_toml_template(path, template="x = 1\n")
    assert path.read_text(encoding="utf-8") == "x = 1\n"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600

    with pytest.raises(ConfigError, match="already exists"):
        write_toml_template(path, template="x = 2\n")

    write_toml_template(path, template="x = 2\n", overwrite=True)
    assert path.read_text(encoding="utf-8") == "x = 2\n"

"""
Tests for checker configuration loading.
"""

import json

import pytest

from frontdoc.config import CheckConfig, ConfigError, config_from_dict, load_config


def test_defaults():
    config = load_config(None)
    assert config == CheckConfig()
    assert config.required_fields == ("title", "date")
    assert not config.allow_extra_fields
    assert config.allowed_schemes == ("http", "https", "mailto")


def test_toml_file(tmp_path):
    path = tmp_path / "frontdoc.toml"
    path.write_text('optional_fields = ["draft"]\nrequire_code_language = true\n', encoding="utf-8")
    config = load_config(str(path))
    assert config.optional_fields == ("draft",)
    assert config.require_code_language
    assert config.required_fields == ("title", "date")


def test_json_file(tmp_path):
    path = tmp_path / "frontdoc.json"
    path.write_text(json.dumps({"allowed_languages": ["rust"], "strict": True}), encoding="utf-8")
    config = load_config(path)
    assert config.allowed_languages == ("rust",)
    assert config.strict


def test_pyproject_table(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "site"\n\n[tool.frontdoc]\nallow_relative_links = false\n', encoding="utf-8")
    assert not load_config(str(path)).allow_relative_links


def test_pyproject_without_table(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[project]\nname = "site"\n', encoding="utf-8")
    assert load_config(str(path)) == CheckConfig()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(str(tmp_path / "nope.toml"))


def test_unsupported_format(tmp_path):
    path = tmp_path / "frontdoc.ini"
    path.write_text("[frontdoc]\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Unsupported"):
        load_config(str(path))


def test_invalid_toml(tmp_path):
    path = tmp_path / "frontdoc.toml"
    path.write_text("strict = \n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(str(path))


def test_unknown_key():
    with pytest.raises(ConfigError, match="Unknown config keys"):
        config_from_dict({"required_feilds": ["title"]})


@pytest.mark.parametrize("data", [
    {"strict": "yes"},
    {"required_fields": "title"},
    {"allowed_schemes": 3},
])
def test_wrong_types(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)


def test_with_overrides_ignores_none():
    config = CheckConfig(strict=True)
    assert config.with_overrides(strict=None, allow_extra_fields=True) == CheckConfig(
        strict=True, allow_extra_fields=True
    )


def test_undecodable_config(tmp_path):
    path = tmp_path / "frontdoc.toml"
    path.write_bytes(b"strict = \xff\n")
    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(str(path))


def test_schemes_are_lower_cased(tmp_path):
    path = tmp_path / "frontdoc.toml"
    path.write_text('allowed_schemes = ["HTTPS", "Mailto"]\n', encoding="utf-8")
    assert load_config(path).allowed_schemes == ("https", "mailto")

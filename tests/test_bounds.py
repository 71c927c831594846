"""
Tests for derivation/bounds.py settings resolution.
"""

import pytest

from derivation.bounds import SearchSettings, SettingsError, load_settings


def write_yaml(tmp_path, text):
    path = tmp_path / "prover.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestSearchSettings:
    """Test defaults and validation."""

    def test_defaults(self, default_settings):
        assert default_settings.max_line_length == 15
        assert default_settings.iterations == 50_000
        assert default_settings.sub_max_line_length == 15
        assert default_settings.sub_iterations == 500
        assert default_settings.deduplicate_states is False

    @pytest.mark.parametrize("field", ["max_line_length", "iterations", "sub_max_line_length", "sub_iterations"])
    @pytest.mark.parametrize("value", [0, -3, True, "10"])
    def test_rejects_non_positive_integers(self, field, value):
        with pytest.raises(SettingsError):
            SearchSettings(**{field: value})

    def test_sub_search_uses_sub_budget(self):
        sub = SearchSettings(max_line_length=30, iterations=900, sub_max_line_length=7, sub_iterations=40).sub_search()
        assert sub.max_line_length == 7
        assert sub.iterations == 40

    def test_sub_search_line_bound_capped_by_outer_bound(self):
        sub = SearchSettings(max_line_length=3).sub_search()
        assert sub.max_line_length == 3
        assert sub.sub_max_line_length == 3
        assert sub.iterations == 500

    def test_replace_ignores_none(self, default_settings):
        updated = default_settings.replace(iterations=None, max_line_length=9)
        assert updated.iterations == 50_000
        assert updated.max_line_length == 9

    def test_to_dict(self, default_settings):
        assert default_settings.to_dict()["sub_iterations"] == 500


class TestYamlSettings:
    def test_from_file(self, tmp_path):
        path = write_yaml(
            tmp_path,
            "search:\n  max_line_length: 12\n  deduplicate_states: true\n"
            "sub_search:\n  iterations: 300\n",
        )
        settings = SearchSettings.from_file(path)
        assert settings.max_line_length == 12
        assert settings.deduplicate_states is True
        assert settings.sub_iterations == 300
        assert settings.iterations == 50_000

    def test_empty_file_keeps_base(self, tmp_path):
        base = SearchSettings(iterations=7)
        assert SearchSettings.from_file(write_yaml(tmp_path, ""), base) == base

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="not found"):
            SearchSettings.from_file(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(SettingsError, match="Error parsing YAML"):
            SearchSettings.from_file(write_yaml(tmp_path, "search: [unclosed\n"))

    def test_non_mapping_document(self, tmp_path):
        with pytest.raises(SettingsError, match="expected a mapping"):
            SearchSettings.from_file(write_yaml(tmp_path, "- 1\n- 2\n"))

    def test_bad_value(self, tmp_path):
        with pytest.raises(SettingsError):
            SearchSettings.from_file(write_yaml(tmp_path, "search:\n  iterations: lots\n"))

    @pytest.mark.parametrize("value", ["3.7", "3.0", "\"12\""])
    def test_non_integer_yaml_values_rejected(self, tmp_path, value):
        with pytest.raises(SettingsError, match="expected an integer"):
            SearchSettings.from_file(write_yaml(tmp_path, f"search:\n  max_line_length: {value}\n"))

    def test_bad_section(self):
        with pytest.raises(SettingsError):
            SearchSettings.from_mapping({"search": [1, 2]})


class TestEnvironmentSettings:
    """``PROVER_*`` variables override file values."""

    def test_from_env(self):
        settings = SearchSettings.from_env(
            environ={
                "PROVER_MAX_LINE_LENGTH": "9",
                "PROVER_SUB_ITERATIONS": "11",
                "PROVER_DEDUPE_STATES": "yes",
                "PROVER_ITERATIONS": "",
            }
        )
        assert settings.max_line_length == 9
        assert settings.sub_iterations == 11
        assert settings.deduplicate_states is True
        assert settings.iterations == 50_000

    def test_non_integer_env(self):
        with pytest.raises(SettingsError, match="PROVER_ITERATIONS"):
            SearchSettings.from_env(environ={"PROVER_ITERATIONS": "many"})

    def test_load_settings_layers(self, tmp_path):
        path = write_yaml(tmp_path, "search:\n  max_line_length: 12\n  iterations: 40\n")
        settings = load_settings(path, environ={"PROVER_ITERATIONS": "80"})
        assert settings.max_line_length == 12
        assert settings.iterations == 80

    def test_load_settings_from_env_path(self, tmp_path):
        path = write_yaml(tmp_path, "sub_search:\n  max_line_length: 6\n")
        settings = load_settings(environ={"PROVER_SETTINGS": str(path)})
        assert settings.sub_max_line_length == 6

    def test_missing_default_file_is_not_an_error(self, tmp_path):
        settings = load_settings(environ={"PROVER_SETTINGS": str(tmp_path / "absent.yaml")})
        assert settings == SearchSettings()

    def test_explicit_missing_file_is_an_error(self, tmp_path):
        with pytest.raises(SettingsError):
            load_settings(tmp_path / "absent.yaml", environ={})

    def test_base_layer(self, tmp_path):
        base = SearchSettings(max_line_length=20, iterations=100_000)
        settings = load_settings(environ={"PROVER_SETTINGS": str(tmp_path / "absent.yaml")}, base=base)
        assert settings == base

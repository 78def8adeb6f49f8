"""Unit tests for the configuration module."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import os

import pytest
from pydantic import ValidationError

from textcsv.config import ROOT, TextAndCSVConfig, load_config
from textcsv.errors import ConfigurationError


class TestDefaults:

    def test_default_delimiter_names(self):
        cfg = TextAndCSVConfig()
        assert cfg.name_to_delimiter == {"comma": ",", "tab": "\t", "pipe": "|", "semicolon": ";"}

    def test_candidates_follow_declaration_order(self):
        assert TextAndCSVConfig().candidates == (",", "\t", "|", ";")

    def test_limits(self):
        cfg = TextAndCSVConfig()
        assert cfg.mark_limit == 20000
        assert cfg.min_confidence == 0.50

    def test_root_is_project_root(self):
        """ROOT should point to the project root (contains pyproject.toml)."""
        assert (ROOT / "pyproject.toml").exists()


class TestValidation:

    def test_multi_character_delimiter_rejected(self):
        with pytest.raises(ConfigurationError, match="single character"):
            TextAndCSVConfig(delimiters={"comma": ",", "double": "||"})

    def test_empty_delimiter_rejected(self):
        with pytest.raises(ConfigurationError):
            TextAndCSVConfig(delimiters={"nothing": ""})

    def test_multi_character_candidate_rejected(self):
        with pytest.raises(ConfigurationError):
            TextAndCSVConfig(candidates=(",", "ab"))

    def test_non_positive_mark_limit_rejected(self):
        with pytest.raises(ConfigurationError):
            TextAndCSVConfig(mark_limit=0)

    def test_confidence_out_of_range_rejected(self):
        with pytest.raises(ConfigurationError):
            TextAndCSVConfig(min_confidence=1.5)

    def test_explicit_candidates_kept(self):
        cfg = TextAndCSVConfig(candidates=("\t", ","))
        assert cfg.candidates == ("\t", ",")

    def test_shared_character_dedupes_candidates(self):
        cfg = TextAndCSVConfig(delimiters={"comma": ",", "also-comma": ","})
        assert cfg.candidates == (",",)
        assert cfg.delimiter_to_name[","] == "comma"


class TestImmutability:

    def test_fields_are_frozen(self):
        cfg = TextAndCSVConfig()
        with pytest.raises(ValidationError):
            cfg.mark_limit = 10

    def test_name_map_is_read_only(self):
        cfg = TextAndCSVConfig()
        with pytest.raises(TypeError):
            cfg.name_to_delimiter["pipe"] = "!"

    def test_delimiters_field_is_read_only(self):
        cfg = TextAndCSVConfig()
        with pytest.raises(TypeError):
            cfg.delimiters["double"] = "||"
        assert "double" not in cfg.name_to_delimiter

    def test_dump_round_trips(self):
        cfg = TextAndCSVConfig(delimiters={"comma": ",", "bang": "!"})
        dumped = cfg.model_dump()
        assert dumped["delimiters"] == {"comma": ",", "bang": "!"}
        assert TextAndCSVConfig(**dumped).name_to_delimiter == cfg.name_to_delimiter

    def test_input_dict_is_copied(self):
        names = {"comma": ","}
        cfg = TextAndCSVConfig(delimiters=names)
        names["tab"] = "\t"
        assert "tab" not in cfg.name_to_delimiter


class TestLoadConfig:

    def test_defaults_without_environment(self, monkeypatch, tmp_path):
        for var in ("TEXTCSV_DELIMITERS", "TEXTCSV_CANDIDATES", "TEXTCSV_MARK_LIMIT", "TEXTCSV_MIN_CONFIDENCE"):
            monkeypatch.delenv(var, raising=False)
        cfg = load_config(tmp_path / "missing.env")
        assert cfg.model_dump() == TextAndCSVConfig().model_dump()

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEXTCSV_DELIMITERS", '{"comma": ",", "colon": ":"}')
        monkeypatch.setenv("TEXTCSV_MARK_LIMIT", "500")
        monkeypatch.setenv("TEXTCSV_MIN_CONFIDENCE", "0.75")
        monkeypatch.delenv("TEXTCSV_CANDIDATES", raising=False)
        cfg = load_config(tmp_path / "missing.env")
        assert cfg.candidates == (",", ":")
        assert cfg.mark_limit == 500
        assert cfg.min_confidence == 0.75

    def test_reads_env_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TEXTCSV_MARK_LIMIT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("TEXTCSV_MARK_LIMIT=1234\n", encoding="utf-8")
        try:
            assert load_config(env_file).mark_limit == 1234
        finally:
            os.environ.pop("TEXTCSV_MARK_LIMIT", None)

    def test_bad_json_is_configuration_error(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEXTCSV_DELIMITERS", "{not json")
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.env")

    def test_multi_character_env_delimiter(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TEXTCSV_DELIMITERS", '{"double": "||"}')
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "missing.env")

"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from hebrew_itn.config import ConfigLoader, NormalizerConfig


def test_config_loader_from_yaml_loads_valid_config(tmp_path: Path) -> None:
    """YAML loader should parse valid payloads and normalize list/map values."""

    config_path = tmp_path / "hebrew-itn.yml"
    config_path.write_text(
        """
max_window: 4
thousands_separator: " "
head_nouns:
  - " רציף "
  - אוטובוס
  - רציף
unit_plurals:
  שעה: שעות
cache_enabled: "no"
cache_size: "16"
workers: 2
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.max_window == 4
    assert config.thousands_separator == " "
    assert config.head_nouns == ("רציף", "אוטובוס")
    assert dict(config.unit_plurals) == {"שעה": "שעות"}
    assert config.cache_enabled is False
    assert config.cache_size == 16
    assert config.workers == 2
    assert config.ranking_nouns == NormalizerConfig().ranking_nouns


def test_config_loader_from_yaml_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    assert ConfigLoader.from_yaml(config_path) == NormalizerConfig()


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("- רציף\n- קו\n", "must contain a top-level mapping/object"),
        ("colour: red\n", "unsupported key(s): colour"),
        ("max_window: 0\n", "`max_window` must be a positive integer"),
        ("max_window: many\n", "`max_window` must be a positive integer"),
        ("head_nouns: רציף\n", "`head_nouns` must be a list of words"),
        ("head_nouns:\n  - ''\n", "`head_nouns` contains a blank entry"),
        ("cache_enabled: maybe\n", "`cache_enabled` must be a boolean value"),
        ("unit_plurals: [שעה]\n", "`unit_plurals` must be a mapping/object"),
        ("sync_threshold: -1\n", "`sync_threshold` must be a non-negative integer"),
        ("weekday_nouns: יום\n", "`weekday_nouns` must be a list of words"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_payloads(
    tmp_path: Path, payload: str, message: str
) -> None:
    config_path = tmp_path / "invalid.yml"
    config_path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError) as exc_info:
        ConfigLoader.from_yaml(config_path)

    assert message in str(exc_info.value)


def test_config_loader_from_yaml_rejects_multi_word_table_entries(tmp_path: Path) -> None:
    """Config validation runs after parsing, so table entries must be single words."""

    config_path = tmp_path / "multi.yml"
    config_path.write_text("month_names:\n  - ראש השנה\n", encoding="utf-8")

    with pytest.raises(ValueError, match="single non-empty words"):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_prefixed_variables() -> None:
    config = ConfigLoader.from_env(
        {
            "HEBREW_ITN_MAX_WINDOW": " 3 ",
            "HEBREW_ITN_CACHE": "off",
            "HEBREW_ITN_WORKERS": "2",
            "HEBREW_ITN_BATCH_SIZE": "50",
            "UNRELATED": "value",
        }
    )

    assert config.max_window == 3
    assert config.cache_enabled is False
    assert config.workers == 2
    assert config.batch_size == 50
    assert config.thousands_separator == ","


def test_config_loader_from_env_defaults_and_errors() -> None:
    assert ConfigLoader.from_env({}) == NormalizerConfig()

    with pytest.raises(ValueError, match="HEBREW_ITN_CACHE_SIZE` must be a positive integer"):
        ConfigLoader.from_env({"HEBREW_ITN_CACHE_SIZE": "abc"})
    with pytest.raises(ValueError, match="HEBREW_ITN_CACHE` must be a boolean value"):
        ConfigLoader.from_env({"HEBREW_ITN_CACHE": "sometimes"})


def test_config_loader_accepts_zero_sync_threshold(tmp_path: Path) -> None:
    """A zero threshold sends every batch to the pool, so both loaders must accept it."""

    config_path = tmp_path / "pool-only.yml"
    config_path.write_text("sync_threshold: 0\nweekday_nouns: [יום, ליל]\n", encoding="utf-8")

    yaml_config = ConfigLoader.from_yaml(config_path)
    env_config = ConfigLoader.from_env({"HEBREW_ITN_SYNC_THRESHOLD": " 0 "})

    assert yaml_config.sync_threshold == 0
    assert yaml_config.weekday_nouns == ("יום", "ליל")
    assert env_config.sync_threshold == 0
    with pytest.raises(
        ValueError, match="HEBREW_ITN_SYNC_THRESHOLD` must be a non-negative integer"
    ):
        ConfigLoader.from_env({"HEBREW_ITN_SYNC_THRESHOLD": "-1"})


def test_normalizer_config_validate_rejects_bad_limits() -> None:
    with pytest.raises(ValueError, match="max_window"):
        NormalizerConfig(max_window=0).validate()
    with pytest.raises(ValueError, match="thousands_separator"):
        NormalizerConfig(thousands_separator="1").validate()
    with pytest.raises(ValueError, match="unit_plurals"):
        NormalizerConfig(unit_plurals={"שעה": " "}).validate()


def test_normalizer_config_exposes_plural_units() -> None:
    plural_units = NormalizerConfig().plural_units

    assert "שעות" in plural_units
    assert "שעה" not in plural_units

"""Configuration model and loaders for hebrew-itn.

Responsibilities:
- Define engine configuration (limits and context tables) as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `NormalizerConfig`: injected lookup tables and limits for one engine instance.
- `ConfigLoader`: static construction helpers for `NormalizerConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_permissive_boolean


_DEFAULT_HEAD_NOUNS = (
    "רציף",
    "קו",
    "שער",
    "חדר",
    "עמוד",
    "סעיף",
    "קומה",
    "כביש",
    "טור",
)
_DEFAULT_RANKING_NOUNS = (
    "מקום",
    "פעם",
    "פרק",
    "שלב",
    "סיבוב",
    "עונה",
    "מחזור",
    "דור",
    "כיתה",
    "קומה",
)
_DEFAULT_YEAR_MARKERS = ("שנת",)
_DEFAULT_NEGATIVE_MARKERS = ("מינוס",)
_DEFAULT_MONTH_NAMES = (
    "ינואר",
    "פברואר",
    "מרץ",
    "מרס",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
    "תשרי",
    "חשוון",
    "חשון",
    "כסלו",
    "טבת",
    "שבט",
    "אדר",
    "ניסן",
    "אייר",
    "סיוון",
    "סיון",
    "תמוז",
    "אב",
    "אלול",
)
_DEFAULT_WEEKDAY_NOUNS = ("יום",)
_DEFAULT_UNIT_PLURALS = {
    "שעה": "שעות",
    "דקה": "דקות",
    "שנייה": "שניות",
    "יום": "ימים",
    "שבוע": "שבועות",
    "חודש": "חודשים",
    "שנה": "שנים",
    "קילומטר": "קילומטרים",
    "מטר": "מטרים",
    "ליטר": "ליטרים",
    "כוס": "כוסות",
}
_DEFAULT_MAX_WINDOW = 5
_DEFAULT_CACHE_SIZE = 1024
_DEFAULT_SYNC_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class NormalizerConfig:
    """Limits and context tables injected into a normalization engine.

    Attributes:
        max_window: Largest token window tested by the expression detector.
        thousands_separator: Separator inserted every three digits.
        head_nouns: Nouns that force conversion of a following single numeral word.
        ranking_nouns: Nouns after which `ה` + ordinal renders as `ה-<digits>`.
        year_markers: Words introducing a year (rendered without separators).
        negative_markers: Words negating the following numeral.
        month_names: Month names recognized in date context.
        weekday_nouns: Nouns after which a lone construct numeral names a weekday.
        unit_plurals: Singular measure unit to plural form, used by fractions.
        cache_enabled: Whether the engine memoizes outputs.
        cache_size: Maximum number of memoized outputs.
        workers: Worker pool size; `None` uses the CPU count.
        sync_threshold: Batches of at most this many records run in the caller.
        batch_size: Records per worker task; `None` derives it from batch size.
    """

    max_window: int = _DEFAULT_MAX_WINDOW
    thousands_separator: str = ","
    head_nouns: tuple[str, ...] = _DEFAULT_HEAD_NOUNS
    ranking_nouns: tuple[str, ...] = _DEFAULT_RANKING_NOUNS
    year_markers: tuple[str, ...] = _DEFAULT_YEAR_MARKERS
    negative_markers: tuple[str, ...] = _DEFAULT_NEGATIVE_MARKERS
    month_names: tuple[str, ...] = _DEFAULT_MONTH_NAMES
    weekday_nouns: tuple[str, ...] = _DEFAULT_WEEKDAY_NOUNS
    unit_plurals: Mapping[str, str] = field(default_factory=lambda: dict(_DEFAULT_UNIT_PLURALS))
    cache_enabled: bool = True
    cache_size: int = _DEFAULT_CACHE_SIZE
    workers: int | None = None
    sync_threshold: int = _DEFAULT_SYNC_THRESHOLD
    batch_size: int | None = None

    def validate(self) -> None:
        """Validate limits and tables before an engine is built."""

        if self.max_window <= 0:
            raise ValueError("`max_window` must be a positive integer.")
        if self.cache_size <= 0:
            raise ValueError("`cache_size` must be a positive integer.")
        if self.sync_threshold < 0:
            raise ValueError("`sync_threshold` must not be negative.")
        if self.workers is not None and self.workers <= 0:
            raise ValueError("`workers` must be a positive integer.")
        if self.batch_size is not None and self.batch_size <= 0:
            raise ValueError("`batch_size` must be a positive integer.")
        if self.thousands_separator.isdigit():
            raise ValueError("`thousands_separator` must not be a digit.")
        for field_name in (
            "head_nouns",
            "ranking_nouns",
            "year_markers",
            "negative_markers",
            "month_names",
            "weekday_nouns",
        ):
            self._require_words(getattr(self, field_name), field_name)
        for singular, plural in self.unit_plurals.items():
            if not singular.strip() or not plural.strip():
                raise ValueError("`unit_plurals` must not contain blank entries.")

    @staticmethod
    def _require_words(values: tuple[str, ...], field_name: str) -> None:
        for value in values:
            if not value.strip() or len(value.split()) != 1:
                raise ValueError(f"`{field_name}` entries must be single non-empty words.")

    @property
    def plural_units(self) -> frozenset[str]:
        """Return the set of plural unit forms."""

        return frozenset(self.unit_plurals.values())


class ConfigLoader:
    """Factory methods for creating `NormalizerConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "max_window",
            "thousands_separator",
            "head_nouns",
            "ranking_nouns",
            "year_markers",
            "negative_markers",
            "month_names",
            "weekday_nouns",
            "unit_plurals",
            "cache_enabled",
            "cache_size",
            "workers",
            "sync_threshold",
            "batch_size",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> NormalizerConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> NormalizerConfig:
        """Create a validated config from `HEBREW_ITN_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        defaults = NormalizerConfig()

        max_window = ConfigLoader._optional_env_positive_int(env_map, "HEBREW_ITN_MAX_WINDOW")
        separator = ConfigLoader._optional_env_string(env_map, "HEBREW_ITN_THOUSANDS_SEPARATOR")
        cache_enabled = ConfigLoader._optional_env_boolean(env_map, "HEBREW_ITN_CACHE")
        cache_size = ConfigLoader._optional_env_positive_int(env_map, "HEBREW_ITN_CACHE_SIZE")
        workers = ConfigLoader._optional_env_positive_int(env_map, "HEBREW_ITN_WORKERS")
        sync_threshold = ConfigLoader._optional_env_non_negative_int(
            env_map, "HEBREW_ITN_SYNC_THRESHOLD"
        )
        batch_size = ConfigLoader._optional_env_positive_int(env_map, "HEBREW_ITN_BATCH_SIZE")

        config = NormalizerConfig(
            max_window=max_window or defaults.max_window,
            thousands_separator=separator or defaults.thousands_separator,
            cache_enabled=defaults.cache_enabled if cache_enabled is None else cache_enabled,
            cache_size=cache_size or defaults.cache_size,
            workers=workers,
            sync_threshold=defaults.sync_threshold if sync_threshold is None else sync_threshold,
            batch_size=batch_size,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        payload = yaml.safe_load(raw_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> NormalizerConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)
        defaults = NormalizerConfig()

        unit_plurals = ConfigLoader._optional_string_map(payload, "unit_plurals", source_label)
        config = NormalizerConfig(
            max_window=ConfigLoader._optional_positive_int(
                payload, "max_window", source_label, default=defaults.max_window
            ),
            thousands_separator=ConfigLoader._optional_separator(
                payload, "thousands_separator", source_label, default=defaults.thousands_separator
            ),
            head_nouns=ConfigLoader._optional_word_list(
                payload, "head_nouns", source_label, default=defaults.head_nouns
            ),
            ranking_nouns=ConfigLoader._optional_word_list(
                payload, "ranking_nouns", source_label, default=defaults.ranking_nouns
            ),
            year_markers=ConfigLoader._optional_word_list(
                payload, "year_markers", source_label, default=defaults.year_markers
            ),
            negative_markers=ConfigLoader._optional_word_list(
                payload, "negative_markers", source_label, default=defaults.negative_markers
            ),
            month_names=ConfigLoader._optional_word_list(
                payload, "month_names", source_label, default=defaults.month_names
            ),
            weekday_nouns=ConfigLoader._optional_word_list(
                payload, "weekday_nouns", source_label, default=defaults.weekday_nouns
            ),
            unit_plurals=unit_plurals if unit_plurals else dict(defaults.unit_plurals),
            cache_enabled=ConfigLoader._optional_boolean(
                payload, "cache_enabled", source_label, default=defaults.cache_enabled
            ),
            cache_size=ConfigLoader._optional_positive_int(
                payload, "cache_size", source_label, default=defaults.cache_size
            ),
            workers=ConfigLoader._optional_positive_int(
                payload, "workers", source_label, default=None
            ),
            sync_threshold=ConfigLoader._optional_non_negative_int(
                payload, "sync_threshold", source_label, default=defaults.sync_threshold
            ),
            batch_size=ConfigLoader._optional_positive_int(
                payload, "batch_size", source_label, default=None
            ),
        )
        config.validate()
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys the config model does not know."""

        unknown = sorted(str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int | None
    ) -> int | None:
        """Read and validate a positive integer payload field."""

        return ConfigLoader._optional_bounded_int(
            payload, key, source_label, default, minimum=1, requirement="a positive integer"
        )

    @staticmethod
    def _optional_non_negative_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int | None
    ) -> int | None:
        """Read and validate a non-negative integer payload field."""

        return ConfigLoader._optional_bounded_int(
            payload, key, source_label, default, minimum=0, requirement="a non-negative integer"
        )

    @staticmethod
    def _optional_bounded_int(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        default: int | None,
        *,
        minimum: int,
        requirement: str,
    ) -> int | None:
        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be {requirement}.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(f"{source_label} field `{key}` must be {requirement}.") from exc

        if parsed < minimum:
            raise ValueError(f"{source_label} field `{key}` must be {requirement}.")
        return parsed

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_separator(
        payload: Mapping[str, Any], key: str, source_label: str, default: str
    ) -> str:
        """Read a separator; whitespace separators are kept verbatim."""

        if key not in payload or payload[key] is None:
            return default
        raw_value = payload[key]
        if not isinstance(raw_value, str) or not raw_value:
            raise ValueError(f"{source_label} field `{key}` must be a non-empty string.")
        return raw_value

    @staticmethod
    def _optional_word_list(
        payload: Mapping[str, Any],
        key: str,
        source_label: str,
        default: tuple[str, ...],
    ) -> tuple[str, ...]:
        """Read an optional list of single words."""

        if key not in payload or payload[key] is None:
            return default

        raw = payload[key]
        if isinstance(raw, str) or not isinstance(raw, list | tuple):
            raise ValueError(f"{source_label} field `{key}` must be a list of words.")

        words: list[str] = []
        for raw_item in raw:
            word = normalize_optional_string(raw_item)
            if word is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank entry.")
            if word not in words:
                words.append(word)
        return tuple(words)

    @staticmethod
    def _optional_string_map(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        if key not in payload:
            return {}

        raw = payload[key]
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None:
                raise ValueError(f"{source_label} field `{key}` contains a blank key.")
            if value_value is None:
                raise ValueError(
                    f"{source_label} field `{key}` contains blank value for `{key_value}`."
                )
            normalized[key_value] = value_value
        return normalized

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_positive_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional positive integer from environment mapping."""

        return ConfigLoader._optional_env_bounded_int(
            env, key, minimum=1, requirement="a positive integer"
        )

    @staticmethod
    def _optional_env_non_negative_int(env: Mapping[str, str], key: str) -> int | None:
        """Read an optional non-negative integer from environment mapping."""

        return ConfigLoader._optional_env_bounded_int(
            env, key, minimum=0, requirement="a non-negative integer"
        )

    @staticmethod
    def _optional_env_bounded_int(
        env: Mapping[str, str], key: str, *, minimum: int, requirement: str
    ) -> int | None:
        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            parsed = int(raw_value)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be {requirement}.") from exc
        if parsed < minimum:
            raise ValueError(f"Environment variable `{key}` must be {requirement}.")
        return parsed

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Read an optional boolean from environment mapping."""

        if key not in env:
            return None
        parsed = parse_permissive_boolean(env.get(key))
        if parsed is None:
            raise ValueError(
                f"Environment variable `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, ClassInfo, GradingConfig, SourceSettings, SubjectLabel

"""Config loader.

Responsibilities:
- Load the packaged defaults (config/defaults.yml)
- Load an optional user YAML file and validate it against config_schema.json
- Merge user keys over the defaults (top-level keys replace defaults)
- Build the immutable AppConfig passed to the pipeline
"""

_CONFIG_DIR = Path(__file__).parent
SCHEMA_PATH = _CONFIG_DIR / "config_schema.json"
DEFAULTS_PATH = _CONFIG_DIR / "defaults.yml"


class ConfigError(Exception):
    pass


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return data


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the packaged JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or if the
            data fails validation (unknown keys, wrong types...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _upper_all(values: Any) -> tuple[str, ...]:
    return tuple(str(v).strip().upper() for v in values or ())


def build_config(data: dict[str, Any]) -> AppConfig:
    """Turn validated config data into an ``AppConfig``."""
    subjects = {
        str(key).strip().upper(): SubjectLabel(
            arabic=entry.get("ar", ""),
            transliteration=entry.get("trans", ""),
            french=entry.get("fr", ""),
        )
        for key, entry in (data.get("subjects") or {}).items()
    }
    classes = {
        str(code): ClassInfo(code=str(code), teacher=str(teacher))
        for code, teacher in (data.get("classes") or {}).items()
    }
    grading_kwargs: dict[str, Any] = {}
    if data.get("average_headers"):
        grading_kwargs["average_headers"] = _upper_all(data["average_headers"])
    if "behavior_subjects" in data:
        grading_kwargs["behavior_subjects"] = frozenset(_upper_all(data["behavior_subjects"]))
    if "default_teacher" in data:
        grading_kwargs["default_teacher"] = data["default_teacher"]

    grading = GradingConfig(
        subjects=MappingProxyType(subjects),
        ignored_columns=frozenset(_upper_all(data.get("ignored_columns"))),
        default_max_score=float(data.get("default_max_score", 20)),
        classes=MappingProxyType(classes),
        **grading_kwargs,
    )
    source = SourceSettings(
        data_directory=data.get("source_directory", SourceSettings.data_directory),
        path_template=data.get("path_template", SourceSettings.path_template),
    )
    return AppConfig(grading=grading, source=source)


@lru_cache(maxsize=1)
def _default_data() -> MappingProxyType:
    data = _read_yaml(DEFAULTS_PATH)
    _validate_config_schema(data)
    return MappingProxyType(data)


def default_config() -> AppConfig:
    """Configuration built from the packaged defaults only."""
    return build_config(dict(_default_data()))


def load_config(path: Path | None = None) -> AppConfig:
    """Load the packaged defaults, then overlay ``path`` if given.

    Raises:
        ConfigError: missing file, invalid YAML, or schema violation
    """
    if path is None:
        return default_config()
    user_data = _read_yaml(path)
    _validate_config_schema(user_data)
    merged = dict(_default_data())
    merged.update(user_data)
    return build_config(merged)

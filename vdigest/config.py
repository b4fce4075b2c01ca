from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .extractors import TrackerStrategy
from .naming import NamingConvention
from .types import DetailSignature, TemplateKind

SCHEMA_VERSION = 1
DEFAULT_CFG_FILE = "vdigest.yaml"

# --------------------------------------------------------------------------- #
# ДЕФОЛТЫ
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    "view_paths": ["app/views"],
    "tracker": TrackerStrategy.PATTERN.value,
    "cache": True,
    "details": {
        "locale": ["en"],
        "formats": ["html"],
        "variants": [],
    },
    "naming": {
        "inflect": True,
        "irregular": {},
        "uncountable": [],
    },
    "exclude": [],
}

_yaml = YAML(typ="safe")


@dataclass
class DigestorConfig:
    root: Path
    view_paths: List[Path] = field(default_factory=list)
    tracker: TrackerStrategy = TrackerStrategy.PATTERN
    cache: bool = True
    details: DetailSignature = field(default_factory=DetailSignature)
    naming: NamingConvention = field(default_factory=NamingConvention)
    exclude: List[str] = field(default_factory=list)


# --------------------------------------------------------------------------- #
# HELPERS
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Накладываем значения пользователя поверх дефолтов (вложенные словари — поключево)."""
    cfg = {k: (dict(v) if isinstance(v, dict) else v) for k, v in _DEFAULT_CFG.items()}
    for key, value in raw.items():
        if isinstance(cfg.get(key), dict) and isinstance(value, dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def _str_list(value: Any, path: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{path}: expected a list of strings")
    return list(value)


def _flag(value: Any, path: str) -> bool:
    # строка "false" в YAML истинна для bool(); принимаем только настоящий true/false
    if not isinstance(value, bool):
        raise ConfigError(f"{path}: expected true or false, got {value!r}")
    return value


def _axis(value: Any, path: str) -> Tuple[str, ...]:
    return tuple(_str_list(value, path))


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(root: Path, path: Optional[Path] = None) -> DigestorConfig:
    """
    Загрузить vdigest.yaml из корня проекта.

    • Если файла нет — дефолты.
    • Если schema_version отсутствует — считаем, что это актуальная версия.
    • Неизвестный трекер или неверные типы — ConfigError.
    """
    path = path or (root / DEFAULT_CFG_FILE)
    raw: Dict[str, Any] = {}
    if path.exists():
        try:
            with path.open(encoding="utf-8") as f:
                raw = _yaml.load(f) or {}
        except YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        if not isinstance(raw, dict):
            raise ConfigError(f"{path}: top-level mapping expected")

    if raw.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
        raise ConfigError(
            f"Unsupported config schema {raw.get('schema_version')} "
            f"(tool expects {SCHEMA_VERSION})"
        )

    cfg = _merge_defaults(raw)

    try:
        tracker = TrackerStrategy(str(cfg["tracker"]).lower())
    except ValueError:
        choices = ", ".join(s.value for s in TrackerStrategy)
        raise ConfigError(f"tracker: unknown strategy '{cfg['tracker']}' (expected one of: {choices})")

    details_raw = cfg["details"] or {}
    details = DetailSignature(
        locale=_axis(details_raw.get("locale"), "details.locale"),
        formats=_axis(details_raw.get("formats"), "details.formats"),
        variants=_axis(details_raw.get("variants"), "details.variants"),
        handlers=_axis(details_raw.get("handlers"), "details.handlers") or TemplateKind.handlers(),
    )

    naming_raw = cfg["naming"] or {}
    irregular = naming_raw.get("irregular") or {}
    if not isinstance(irregular, dict):
        raise ConfigError("naming.irregular: expected a mapping singular -> plural")
    naming = NamingConvention(
        irregular={str(k): str(v) for k, v in irregular.items()},
        uncountable=_str_list(naming_raw.get("uncountable"), "naming.uncountable"),
        inflect=_flag(naming_raw.get("inflect", True), "naming.inflect"),
    )

    return DigestorConfig(
        root=root,
        view_paths=[(root / p) for p in _str_list(cfg["view_paths"], "view_paths")],
        tracker=tracker,
        cache=_flag(cfg["cache"], "cache"),
        details=details,
        naming=naming,
        exclude=_str_list(cfg["exclude"], "exclude"),
    )


__all__ = ["DigestorConfig", "load_config", "SCHEMA_VERSION", "DEFAULT_CFG_FILE"]

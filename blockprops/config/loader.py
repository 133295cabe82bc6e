# -*- coding: utf-8 -*-
"""Analysis settings loader.

Precedence: explicit argument > environment variable > conf/settings.ini >
built-in default. A missing ini file is not an error.
"""

from __future__ import annotations

import configparser
import enum
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from blockprops.config.versions import parse_version_to_int, version_at_least
from blockprops.errors import ConfigError
from blockprops.ids import DEFAULT_NAMESPACE

__all__ = [
    "PROJECT_ROOT",
    "DEFAULT_CONFIG_PATH",
    "ScanMode",
    "TagSupportMode",
    "AnalysisConfig",
    "load_ini",
    "resolve_config",
]

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "conf" / "settings.ini"

ENV_PREFIX = "BLOCKPROPS_"


class ScanMode(str, enum.Enum):
    QUICK = "QUICK"  # default state only
    DEEP = "DEEP"  # every state


class TagSupportMode(str, enum.Enum):
    DETECT = "DETECT"  # enabled when the shader loader is new enough
    TRUE = "TRUE"
    FALSE = "FALSE"


# minimum shader loader version that understands block tags
TAG_LOADER_VERSION = (1, 8)


@dataclass(frozen=True)
class AnalysisConfig:
    scan_mode: ScanMode = ScanMode.DEEP
    tag_support: TagSupportMode = TagSupportMode.DETECT
    validate_render_layers: bool = True
    check_light_emitting: bool = True
    check_translucent: bool = True
    check_non_full: bool = True
    check_full: bool = True
    check_block_entity: bool = True
    namespace: str = DEFAULT_NAMESPACE
    mc_version: Optional[str] = None
    iris_version: Optional[str] = None
    euphoria_patches_version: Optional[str] = None
    oculus_version: Optional[str] = None

    @property
    def tag_support_enabled(self) -> bool:
        if self.tag_support is TagSupportMode.TRUE:
            return True
        if self.tag_support is TagSupportMode.FALSE:
            return False
        return version_at_least(self.iris_version, TAG_LOADER_VERSION)

    def with_overrides(self, **kwargs: Any) -> "AnalysisConfig":
        clean = {k: v for k, v in kwargs.items() if v is not None}
        if "scan_mode" in clean:
            clean["scan_mode"] = _enum(ScanMode, clean["scan_mode"], "scan_mode")
        if "tag_support" in clean:
            clean["tag_support"] = _enum(TagSupportMode, clean["tag_support"], "tag_support")
        if "mc_version" in clean:
            clean["mc_version"] = _game_version(clean["mc_version"], "mc_version")
        return replace(self, **clean)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["scan_mode"] = self.scan_mode.value
        out["tag_support"] = self.tag_support.value
        out["tag_support_enabled"] = self.tag_support_enabled
        return out


# ini key / env suffix -> (field, kind)
_FIELDS = {
    "SCAN_MODE": ("scan_mode", "scan_mode"),
    "TAG_SUPPORT": ("tag_support", "tag_support"),
    "VALIDATE_RENDER_LAYERS": ("validate_render_layers", "bool"),
    "CHECK_LIGHT_EMITTING": ("check_light_emitting", "bool"),
    "CHECK_TRANSLUCENT": ("check_translucent", "bool"),
    "CHECK_NON_FULL": ("check_non_full", "bool"),
    "CHECK_FULL": ("check_full", "bool"),
    "CHECK_BLOCK_ENTITY": ("check_block_entity", "bool"),
    "DEFAULT_NAMESPACE": ("namespace", "str"),
    "MC_VERSION": ("mc_version", "game_version"),
    "IRIS_VERSION": ("iris_version", "str"),
    "EUPHORIA_PATCHES_VERSION": ("euphoria_patches_version", "str"),
    "OCULUS_VERSION": ("oculus_version", "str"),
}

_SECTIONS = ("ANALYSIS", "ENVIRONMENT")

_BOOLS = {"1": True, "yes": True, "true": True, "on": True, "0": False, "no": False, "false": False, "off": False}


def _enum(cls, raw: Any, name: str):
    if isinstance(raw, cls):
        return raw
    try:
        return cls(str(raw).strip().upper())
    except ValueError:
        valid = ", ".join(m.value for m in cls)
        raise ConfigError(f"Invalid {name}: {raw!r} (valid values: {valid})") from None


def _game_version(raw: Any, name: str) -> str:
    version = str(raw).strip()
    try:
        parse_version_to_int(version)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: {raw!r} ({exc})") from exc
    return version


def _convert(key: str, kind: str, raw: str) -> Any:
    if kind == "scan_mode":
        return _enum(ScanMode, raw, key)
    if kind == "tag_support":
        return _enum(TagSupportMode, raw, key)
    if kind == "game_version":
        return _game_version(raw, key)
    if kind == "bool":
        val = _BOOLS.get(raw.strip().lower())
        if val is None:
            raise ConfigError(f"Invalid boolean for {key}: {raw!r}")
        return val
    return raw.strip()


def load_ini(path: Path) -> configparser.ConfigParser:
    cfg = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
    if path.exists():
        try:
            cfg.read(path, encoding="utf-8")
        except configparser.Error as exc:
            raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    return cfg


def _cfg_get(cfg: configparser.ConfigParser, key: str) -> Optional[str]:
    for section in _SECTIONS:
        val = cfg.get(section, key, fallback="").strip()
        if val:
            return val
    return None


def resolve_config(
    *,
    config_path: Optional[Path] = DEFAULT_CONFIG_PATH,
    environ: Optional[Dict[str, str]] = None,
    **overrides: Any,
) -> AnalysisConfig:
    """Build an AnalysisConfig from ini + environment + keyword overrides."""
    env = os.environ if environ is None else environ
    cfg = load_ini(Path(config_path)) if config_path else configparser.ConfigParser()

    values: Dict[str, Any] = {}
    for key, (field_name, kind) in _FIELDS.items():
        raw = env.get(ENV_PREFIX + key) or _cfg_get(cfg, key)
        if raw:
            values[field_name] = _convert(key, kind, raw)

    return AnalysisConfig(**values).with_overrides(**overrides)

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Type, TypeVar, Any, Dict, Iterable
from pydantic import BaseModel, Field
from yaml import safe_load, YAMLError
from dotenv import load_dotenv, find_dotenv

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="MapperConfig")


class MapperConfig(BaseModel):
    """Base of the option models read by ConfigLoader."""
    pass


class MappingOptions(MapperConfig):
    """Global switches of the marshalling engine."""
    strict_mode: bool = Field(False, description="Raise on unresolvable related records instead of leaving them unset")
    enable_lang_aware: bool = Field(False, description="Keep only literals tagged with the member's declared language")
    strong_typing: bool = Field(True, description="Write typed literals; when off every scalar is a plain literal")
    enforce_entity_annotation: bool = Field(False, description="Require the @entity marker on mapped types")
    infer_bindings: bool = Field(True, description="Map dataclass fields without an explicit predicate under the base namespace")
    default_language: Optional[str] = Field(None, description="Language preferred when no untagged literal exists")
    namespaces: Dict[str, str] = Field(default_factory=dict, description="Prefixes registered on mapper creation")
    log_level: str = Field("WARNING", description="Logging level of the command line tool")


HOME_CONFIG_DIR = Path("~/.kgconf/").expanduser()


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("r") as f:
            data = safe_load(f)
    except YAMLError as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data or {}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into ``base``; nested mappings such as ``namespaces`` merge key by key."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


class ConfigLoader:
    """
    Layered config loader with deep merging.

    Load order (low → high priority):
      1) base:   ~/.kgconf/{name}.yaml (or .yml)
      2) cwd:    ./{name}.yaml (or .yml)
      3) file:   explicit `path` if provided
      4) env:    YAML content from env var {NAME}_CONFIG, then {NAME}_{field}

    Later layers override earlier ones (deep merge).
    """
    def __init__(self, config_name: str = "kgmap"):
        self.config_name = config_name or "kgmap"

    def _candidate_paths(self, path: Optional[str | Path]) -> Iterable[Path]:
        explicit = [Path(path)] if path else []

        # support both .yaml and .yml
        base = [
            HOME_CONFIG_DIR / f"{self.config_name}.yaml",
            HOME_CONFIG_DIR / f"{self.config_name}.yml",
        ]
        cwd = [
            Path.cwd() / f"{self.config_name}.yaml",
            Path.cwd() / f"{self.config_name}.yml",
        ]

        # merge order: base → cwd → explicit
        return base + cwd + explicit

    def _load_dotenv(self) -> None:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            logger.debug("Loading .env from: %s", dotenv_path)
            load_dotenv(dotenv_path, override=False)

        specific = Path.cwd() / f"{self.config_name}.env"
        if specific.exists():
            logger.debug("Loading config-specific .env from: %s", specific)
            load_dotenv(specific, override=True)

    def _env_layer(self, config_class: Type[T]) -> Dict[str, Any]:
        env_config: Dict[str, Any] = {}

        env_var_name = f"{self.config_name.upper()}_CONFIG"
        env_content = os.environ.get(env_var_name)
        if env_content:
            try:
                d = safe_load(env_content)
            except YAMLError as e:
                raise ValueError(f"Failed to parse {env_var_name}: {e}") from e
            if isinstance(d, dict):
                env_config = d

        env_prefix = f"{self.config_name.upper()}_"
        for field_name in config_class.model_fields.keys():
            for env_var_key in (env_prefix + field_name, env_prefix + field_name.upper()):
                env_value = os.environ.get(env_var_key)
                if env_value is None:
                    continue
                # YAML parsing turns "true" and "{a: b}" into proper values
                try:
                    env_config[field_name] = safe_load(env_value)
                except YAMLError:
                    env_config[field_name] = env_value
                break
        return env_config

    def load_config(self, config_class: Type[T], path: Optional[str | Path] = None) -> T:
        if path and not Path(path).exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        self._load_dotenv()

        merged: Dict[str, Any] = {}
        for p in self._candidate_paths(path):
            d = _read_yaml(p)
            if d:
                logger.debug("Merging config layer %s", p)
                merged = _deep_merge(merged, d)

        env_config = self._env_layer(config_class)
        if env_config:
            merged = _deep_merge(merged, env_config)

        return config_class(**merged)


def load_options(path: Optional[str | Path] = None) -> MappingOptions:
    return ConfigLoader("kgmap").load_config(MappingOptions, path)

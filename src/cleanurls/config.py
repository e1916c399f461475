"""YAML config loading with env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from cleanurls.settings import Settings
from cleanurls.tracking import DEFAULT_RULES, TrackingRules


class RulesConfig(BaseModel):
    """Site-local additions to the built-in tracking tables."""

    extra_exact: list[str] = []
    extra_prefixes: list[str] = []
    extra_preserve: list[str] = []
    extra_fragment_prefixes: list[str] = []


class AppConfig(BaseModel):
    rules: RulesConfig = RulesConfig()
    settings: Settings = Field(default_factory=Settings)


def load_config(config_path: str = "cleanurls.yaml") -> AppConfig:
    """Load config from YAML file, then apply env var overrides."""
    load_dotenv()

    data: dict = {}
    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    config = AppConfig(**data)

    env_map = {
        "CLEANURLS_LOG_DIR": "log_dir",
        "CLEANURLS_LOG_LEVEL": "log_level",
    }
    for env_var, field_name in env_map.items():
        val = os.environ.get(env_var)
        if val is not None:
            setattr(config.settings, field_name, val)

    return config


def build_rules(config: AppConfig) -> TrackingRules:
    """Built-in tracking rules extended with the config's extra names."""
    return DEFAULT_RULES.extend(
        exact=config.rules.extra_exact,
        prefixes=config.rules.extra_prefixes,
        preserve=config.rules.extra_preserve,
        fragment_prefixes=config.rules.extra_fragment_prefixes,
    )

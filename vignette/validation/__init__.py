"""Разбор номерных знаков и конфигурация политики."""

from pathlib import Path

from .base import FormatError, LicensePlate, PlateRules, PolicyConfig
from .loader import ConfigError, default_policy_config, load_policy_config
from .plate_parser import PlateParser

__all__ = [
    "ConfigError",
    "FormatError",
    "LicensePlate",
    "PlateParser",
    "PlateRules",
    "PolicyConfig",
    "default_policy_config",
    "load_policy_config",
    "validation_config_dir",
]


def validation_config_dir() -> Path:
    """Возвращает путь до каталога с YAML-конфигурациями."""

    return Path(__file__).resolve().parent / "configs"

"""Загрузка конфигурации политики из YAML."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable

import yaml

from .base import ChannelRules, PlateRules, PolicyConfig

KNOWN_CHANNELS = ("E-Mail", "SMS")
KNOWN_CHECKS = ("email", "regex")


class ConfigError(ValueError):
    """Некорректная или отсутствующая конфигурация."""


def _compile_or_fail(pattern: str, where: str) -> str:
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"{where}: invalid regex {pattern!r}: {exc}") from exc
    return pattern


def _positive_int(value, where: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where}: expected an integer, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{where}: must be positive, got {number}")
    return number


def _parse_plate(raw: dict | None) -> PlateRules:
    raw = raw or {}
    defaults = PlateRules()
    rules = PlateRules(
        min_length=_positive_int(raw.get("min_length", defaults.min_length), "plate.min_length"),
        max_length=_positive_int(raw.get("max_length", defaults.max_length), "plate.max_length"),
        pattern=_compile_or_fail(str(raw.get("regex", defaults.pattern)), "plate.regex"),
        max_region_length=_positive_int(
            raw.get("max_region_length", defaults.max_region_length), "plate.max_region_length"
        ),
    )
    if rules.min_length > rules.max_length:
        raise ConfigError("plate.min_length is greater than plate.max_length")
    return rules


def _parse_districts(raw: Iterable[dict] | None) -> Dict[str, str]:
    districts: Dict[str, str] = {}
    for item in raw or []:
        code = str(item.get("code", "")).strip()
        if not code:
            continue
        districts[code] = str(item.get("name", ""))
    if not districts:
        raise ConfigError("districts: at least one district is required")
    return districts


def _parse_channels(raw: dict | None) -> Dict[str, ChannelRules]:
    channels: Dict[str, ChannelRules] = {}
    for label, item in (raw or {}).items():
        label = str(label)
        if label not in KNOWN_CHANNELS:
            raise ConfigError(f"channels: unknown channel {label!r}")
        item = item or {}
        check = str(item.get("check", ""))
        if check not in KNOWN_CHECKS:
            raise ConfigError(f"channels.{label}: unknown check {check!r}")
        pattern = ""
        if check == "regex":
            pattern = _compile_or_fail(str(item.get("regex", "")), f"channels.{label}.regex")
            if not pattern:
                raise ConfigError(f"channels.{label}: regex check requires a pattern")
        channels[label] = ChannelRules(kind=check, pattern=pattern)

    missing = [label for label in KNOWN_CHANNELS if label not in channels]
    if missing:
        raise ConfigError(f"channels: missing definitions for {', '.join(missing)}")
    return channels


def parse_policy_config(data: dict) -> PolicyConfig:
    """Собирает PolicyConfig из уже прочитанного YAML-словаря."""

    reminder = data.get("reminder", {}) or {}
    return PolicyConfig(
        name=str(data.get("name", "")),
        plate=_parse_plate(data.get("plate")),
        districts=_parse_districts(data.get("districts")),
        channels=_parse_channels(data.get("channels")),
        validity_days=_positive_int(reminder.get("validity_days", 365), "reminder.validity_days"),
        reminder_days_before_expiry=_positive_int(
            reminder.get("days_before_expiry", 14), "reminder.days_before_expiry"
        ),
    )


def load_policy_config(config_dir: Path, country: str = "AT") -> PolicyConfig:
    """Читает YAML-конфигурации каталога и возвращает конфигурацию страны."""

    wanted = country.upper()
    for path in sorted(Path(config_dir).glob("*.yaml")):
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if str(data.get("code", "")).upper() != wanted:
            continue
        return parse_policy_config(data)

    raise ConfigError(f"no configuration for country {wanted!r} in {config_dir}")


@lru_cache(maxsize=1)
def default_policy_config() -> PolicyConfig:
    """Конфигурация из пакета; читается один раз на процесс."""

    from . import validation_config_dir

    return load_policy_config(validation_config_dir())

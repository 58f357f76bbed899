"""Базовые модели данных для разбора номерных знаков и политики напоминаний."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping


@dataclass(frozen=True)
class LicensePlate:
    """Нормализованный австрийский номер: код округа + остаток."""

    formatted: str
    region_code: str

    @property
    def readable(self) -> str:
        return f"{self.region_code}-{self.formatted[len(self.region_code):]}"


@dataclass(frozen=True)
class FormatError:
    """Номер не прошёл разбор."""

    reason: str
    detail: str
    raw: str = ""

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class PlateRules:
    """Ограничения формата номера."""

    min_length: int = 3
    max_length: int = 8
    pattern: str = r"^[A-Z]+[0-9]+[A-Z]*$"
    max_region_length: int = 2


@dataclass(frozen=True)
class ChannelRules:
    """Проверка контакта для канала: тип проверки и, для regex, шаблон."""

    kind: str
    pattern: str = ""


@dataclass(frozen=True)
class PolicyConfig:
    """Конфигурация политики, загружаемая из YAML."""

    name: str
    plate: PlateRules
    districts: Mapping[str, str]
    channels: Mapping[str, ChannelRules]
    validity_days: int = 365
    reminder_days_before_expiry: int = 14
    district_codes: FrozenSet[str] = field(init=False, default=frozenset())

    def __post_init__(self) -> None:
        # Общий экземпляр на процесс: таблицы только для чтения.
        object.__setattr__(self, "districts", MappingProxyType(dict(self.districts)))
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))
        object.__setattr__(self, "district_codes", frozenset(self.districts))

    def is_known_district(self, code: str) -> bool:
        return code in self.district_codes

"""Модели запроса, результата и ошибок регистрации напоминания."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from ..validation.base import LicensePlate


class Channel(Enum):
    """Канал связи. Значение совпадает с меткой, которую присылает клиент."""

    EMAIL = "E-Mail"
    SMS = "SMS"

    @property
    def label(self) -> str:
        return self.value

    @property
    def expected_input(self) -> str:
        return _EXPECTED_INPUT[self]

    @classmethod
    def from_label(cls, label: str) -> Optional["Channel"]:
        for channel in cls:
            if channel.value == label:
                return channel
        return None


_EXPECTED_INPUT = {
    Channel.EMAIL: "E-Mail-Adresse",
    Channel.SMS: "Telefonnummer",
}


class ErrorKind(Enum):
    CONSENT_DENIED = "consent_denied"
    MALFORMED_PLATE = "malformed_plate"
    UNKNOWN_DISTRICT = "unknown_district"
    CONTACT_MISMATCH = "contact_mismatch"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class PolicyError:
    """Отказ в регистрации: вид ошибки и текст для пользователя."""

    kind: ErrorKind
    detail: str

    @property
    def retryable(self) -> bool:
        # Без нового согласия повтор не имеет смысла.
        return self.kind is not ErrorKind.CONSENT_DENIED

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "detail": self.detail}

    def __str__(self) -> str:
        return self.detail


@dataclass(frozen=True)
class ReminderRequest:
    """Сырые данные запроса от вызывающей стороны."""

    has_consent: bool
    plate: str
    contact: str
    channel: str


@dataclass(frozen=True)
class FollowUpAction:
    """Следующий шаг double opt-in: ссылка по e-mail или код по SMS."""

    kind: str
    secret: str
    description: str
    valid_minutes: Optional[int] = None


@dataclass(frozen=True)
class ReminderResult:
    """Результат успешной регистрации."""

    plate: LicensePlate
    today: datetime
    expiry_date: datetime
    reminder_date: datetime
    channel: Channel
    masked_contact: str
    action: FollowUpAction
    district_name: str = ""

    @property
    def region_code(self) -> str:
        return self.plate.region_code

    @property
    def readable_plate(self) -> str:
        return self.plate.readable

    def to_dict(self) -> dict:
        return {
            "plate": self.readable_plate,
            "region_code": self.region_code,
            "district": self.district_name,
            "today": self.today.date().isoformat(),
            "expiry_date": self.expiry_date.date().isoformat(),
            "reminder_date": self.reminder_date.isoformat(timespec="minutes"),
            "channel": self.channel.label,
            "contact": self.masked_contact,
            "action": self.action.kind,
            "action_valid_minutes": self.action.valid_minutes,
        }


RegistrationOutcome = Union[ReminderResult, PolicyError]

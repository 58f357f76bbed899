"""Проверка и маскирование контактных данных."""

from __future__ import annotations

import math
import re
from typing import Callable, Dict, Mapping

from email_validator import EmailNotValidError, validate_email

from ..validation.base import ChannelRules
from .base import Channel

MASK = "***"

ContactCheck = Callable[[str], bool]


def is_email(contact: str) -> bool:
    # Только ASCII, включая домен: IDN-адреса не принимаем.
    if not contact.isascii():
        return False
    try:
        validate_email(contact, check_deliverability=False, allow_smtputf8=False)
    except EmailNotValidError:
        return False
    return True


def regex_check(pattern: str) -> ContactCheck:
    compiled = re.compile(pattern)

    def check(contact: str) -> bool:
        return compiled.fullmatch(contact) is not None

    return check


def build_contact_checks(channels: Mapping[str, ChannelRules]) -> Dict[Channel, ContactCheck]:
    """Таблица канал -> функция проверки из конфигурации."""

    checks: Dict[Channel, ContactCheck] = {}
    for label, rules in channels.items():
        channel = Channel.from_label(label)
        if channel is None:
            continue
        checks[channel] = is_email if rules.kind == "email" else regex_check(rules.pattern)
    return checks


def _mask_email(contact: str) -> str:
    parts = contact.split("@")
    local = parts[0]
    domain = parts[1] if len(parts) > 1 else "unknown"
    visible = min(3, max(1, math.ceil(len(local) * 0.3)))
    return f"{local[:visible]}{MASK}@{domain}"


def _mask_phone(contact: str) -> str:
    if len(contact) > 6:
        return f"{contact[:3]}{MASK}{contact[-3:]}"
    return f"{contact[:2]}{MASK}"


_MASKERS: Dict[Channel, Callable[[str], str]] = {
    Channel.EMAIL: _mask_email,
    Channel.SMS: _mask_phone,
}


def mask_contact(contact: str, channel: Channel) -> str:
    """Частично скрывает контакт для вывода и логов.

    max.mustermann@firma.at -> max***@firma.at
    +436641234567 -> +43***567
    """

    return _MASKERS[channel](contact)

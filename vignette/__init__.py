"""Проверка номеров и регистрация напоминаний для цифровой виньетки."""

from .reminders import Channel, ErrorKind, PolicyError, ReminderPolicy, ReminderRequest, ReminderResult
from .validation import FormatError, LicensePlate, PlateParser

__all__ = [
    "Channel",
    "ErrorKind",
    "FormatError",
    "LicensePlate",
    "PlateParser",
    "PolicyError",
    "ReminderPolicy",
    "ReminderRequest",
    "ReminderResult",
]

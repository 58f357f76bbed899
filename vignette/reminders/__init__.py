"""Регистрация напоминаний об окончании срока виньетки."""

from .base import (
    Channel,
    ErrorKind,
    FollowUpAction,
    PolicyError,
    RegistrationOutcome,
    ReminderRequest,
    ReminderResult,
)
from .contacts import mask_contact
from .policy import ReminderPolicy
from .responses import build_response, format_summary, handle_request, status_for

__all__ = [
    "Channel",
    "ErrorKind",
    "FollowUpAction",
    "PolicyError",
    "RegistrationOutcome",
    "ReminderPolicy",
    "ReminderRequest",
    "ReminderResult",
    "build_response",
    "format_summary",
    "handle_request",
    "mask_contact",
    "status_for",
]

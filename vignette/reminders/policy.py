"""Регистрация напоминания об окончании срока виньетки."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional, Union

from ..logging_manager import get_logger
from ..validation.base import FormatError, PolicyConfig
from ..validation.loader import default_policy_config, load_policy_config
from ..validation.plate_parser import PlateParser
from .base import (
    Channel,
    ErrorKind,
    FollowUpAction,
    PolicyError,
    RegistrationOutcome,
    ReminderRequest,
    ReminderResult,
)
from .contacts import build_contact_checks, mask_contact
from .tokens import SMS_CODE_VALID_MINUTES, issue_confirmation_token, issue_sms_code

logger = get_logger(__name__)


class ReminderPolicy:
    """Применяет правила: согласие, номер, округ, контакт, даты."""

    def __init__(
        self,
        config: Optional[PolicyConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        token_factory: Callable[[], str] = issue_confirmation_token,
        code_factory: Callable[[], str] = issue_sms_code,
    ) -> None:
        self.config = config or default_policy_config()
        self.parser = PlateParser(self.config.plate)
        self.contact_checks = build_contact_checks(self.config.channels)
        self.clock = clock or datetime.now
        self.token_factory = token_factory
        self.code_factory = code_factory

    @classmethod
    def from_config_dir(cls, config_dir: Path, country: str = "AT", **kwargs) -> "ReminderPolicy":
        return cls(load_policy_config(config_dir, country), **kwargs)

    def register(
        self,
        has_consent: bool,
        plate_input: str,
        contact: str,
        channel: Union[Channel, str],
        now: Optional[datetime] = None,
    ) -> RegistrationOutcome:
        # Без согласия не трогаем ни номер, ни контакт.
        if has_consent is not True:
            return self._consent_denied()

        if not isinstance(channel, Channel):
            resolved = Channel.from_label(channel) if isinstance(channel, str) else None
            if resolved is None:
                return self._unknown_channel(channel)
            channel = resolved

        plate = self.parser.parse(plate_input)
        if isinstance(plate, FormatError):
            logger.warning("Registration rejected: malformed plate (%s)", plate.reason)
            return PolicyError(ErrorKind.MALFORMED_PLATE, plate.detail)

        if not self.config.is_known_district(plate.region_code):
            logger.warning("Registration rejected: unknown district %s", plate.region_code)
            return PolicyError(
                ErrorKind.UNKNOWN_DISTRICT,
                f"Warnung: Bezirk '{plate.region_code}' ist in unserer Datenbank nicht hinterlegt. "
                "Bitte prüfen Sie auf Tippfehler. Gültige Bezirke: " + ", ".join(self.config.districts),
            )

        if not self.contact_checks[channel](contact):
            logger.warning("Registration rejected: contact does not fit channel %s", channel.label)
            return PolicyError(
                ErrorKind.CONTACT_MISMATCH,
                f"Ungültige Kontaktdaten für Kanal '{channel.label}'. "
                f"Erwartet: {channel.expected_input}.",
            )

        today = now or self.clock()
        expiry_date = today + timedelta(days=self.config.validity_days)
        reminder_date = expiry_date - timedelta(days=self.config.reminder_days_before_expiry)

        action = self._follow_up(channel)
        masked = mask_contact(contact, channel)

        logger.info(
            "Reminder registered: plate=%s district=%s channel=%s contact=%s reminder=%s",
            plate.readable,
            plate.region_code,
            channel.label,
            masked,
            reminder_date.date().isoformat(),
        )
        return ReminderResult(
            plate=plate,
            today=today,
            expiry_date=expiry_date,
            reminder_date=reminder_date,
            channel=channel,
            masked_contact=masked,
            action=action,
            district_name=self.config.districts.get(plate.region_code, ""),
        )

    def register_request(self, request: ReminderRequest, now: Optional[datetime] = None) -> RegistrationOutcome:
        """Проверяет сырые поля запроса и передаёт их в register."""

        if not isinstance(request.has_consent, bool):
            return PolicyError(ErrorKind.INVALID_INPUT, "Feld 'has_consent' muss true oder false sein.")
        if not request.has_consent:
            return self._consent_denied()

        for field_name in ("plate", "contact"):
            value = getattr(request, field_name)
            if not isinstance(value, str) or not value.strip():
                return PolicyError(ErrorKind.INVALID_INPUT, f"Feld '{field_name}' darf nicht leer sein.")

        channel = Channel.from_label(request.channel)
        if channel is None:
            return self._unknown_channel(request.channel)

        return self.register(request.has_consent, request.plate, request.contact, channel, now=now)

    @staticmethod
    def _unknown_channel(channel) -> PolicyError:
        logger.warning("Registration rejected: unknown channel label %r", channel)
        labels = ", ".join(c.label for c in Channel)
        return PolicyError(ErrorKind.INVALID_INPUT, f"Unbekannter Kanal '{channel}'. Erlaubt: {labels}.")

    @staticmethod
    def _consent_denied() -> PolicyError:
        logger.warning("Registration rejected: no consent")
        return PolicyError(
            ErrorKind.CONSENT_DENIED,
            "ABBRUCH: Verarbeitung gestoppt. Keine Einwilligung (Consent) des Nutzers. "
            "Gemäß Art. 6 Abs. 1 lit. a DSGVO ist eine Verarbeitung nicht zulässig.",
        )

    def _follow_up(self, channel: Channel) -> FollowUpAction:
        if channel is Channel.EMAIL:
            token = self.token_factory()
            return FollowUpAction(
                kind="double_opt_in_link",
                secret=token,
                description=(
                    f"Double-Opt-In Link generiert (Token: {token}). Bestätigungs-E-Mail wird versendet."
                ),
            )
        return FollowUpAction(
            kind="sms_code",
            secret=self.code_factory(),
            description=(
                "6-stelliger SMS-Bestätigungscode generiert. "
                f"Nutzer muss Code innerhalb von {SMS_CODE_VALID_MINUTES} Minuten eingeben."
            ),
            valid_minutes=SMS_CODE_VALID_MINUTES,
        )

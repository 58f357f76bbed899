"""Преобразование результата регистрации в ответ для внешнего слоя."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Mapping, Tuple

from ..logging_manager import get_logger
from .base import ErrorKind, PolicyError, RegistrationOutcome, ReminderRequest, ReminderResult

logger = get_logger(__name__)

_STATUS_BY_KIND: Dict[ErrorKind, HTTPStatus] = {
    ErrorKind.CONSENT_DENIED: HTTPStatus.FORBIDDEN,
    ErrorKind.MALFORMED_PLATE: HTTPStatus.BAD_REQUEST,
    ErrorKind.UNKNOWN_DISTRICT: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorKind.CONTACT_MISMATCH: HTTPStatus.BAD_REQUEST,
    ErrorKind.INVALID_INPUT: HTTPStatus.BAD_REQUEST,
}

DATE_FORMAT = "%d.%m.%Y"
DATETIME_FORMAT = "%d.%m.%Y %H:%M"

Response = Tuple[HTTPStatus, Dict[str, Any]]


def status_for(kind: ErrorKind) -> HTTPStatus:
    return _STATUS_BY_KIND[kind]


def format_summary(result: ReminderResult) -> str:
    """Текстовая сводка успешной регистрации для пользователя."""

    district = result.region_code
    if result.district_name:
        district = f"{result.region_code} ({result.district_name})"

    lines = [
        "SYSTEM STATUS: ERFOLGREICH REGISTRIERT",
        "Fahrzeug-Info:",
        f"   • Kennzeichen: {result.readable_plate}",
        f"   • Bezirk: {district}",
        f"   • Vignetten-Gültigkeit: {result.today.strftime(DATE_FORMAT)} - "
        f"{result.expiry_date.strftime(DATE_FORMAT)}",
        "",
        "Kommunikation:",
        f"   • Kanal: {result.channel.label}",
        f"   • Ziel: {result.masked_contact}",
        f"   • Aktion: {result.action.description}",
        "",
        "Zeitplan:",
        f"   • Reminder-Versand: {result.reminder_date.strftime(DATETIME_FORMAT)} "
        f"({(result.expiry_date - result.reminder_date).days} Tage vor Ablauf)",
        f"   • Vignetten-Ablauf: {result.expiry_date.strftime(DATE_FORMAT)}",
        "",
        "Datenschutz:",
        "   • Einwilligung: Liegt vor (Art. 6 Abs. 1 lit. a DSGVO)",
        "   • Speicherdauer: Bis Widerruf oder 30 Tage nach Ablauf",
        "   • Widerrufsrecht: Jederzeit per E-Mail an datenschutz@vignette.at",
    ]
    return "\n".join(lines)


def build_response(outcome: RegistrationOutcome) -> Response:
    if isinstance(outcome, PolicyError):
        return status_for(outcome.kind), {"success": False, "error": outcome.detail, **outcome.to_dict()}

    return HTTPStatus.CREATED, {
        "success": True,
        "message": "Reminder erfolgreich angelegt.",
        "details": format_summary(outcome),
        "reminder": outcome.to_dict(),
    }


def handle_request(policy, payload: Mapping[str, Any]) -> Response:
    """Обрабатывает JSON-подобный запрос целиком; неожиданные сбои дают 500."""

    try:
        request = ReminderRequest(
            has_consent=payload.get("has_consent"),
            plate=payload.get("plate"),
            contact=payload.get("contact"),
            channel=payload.get("channel"),
        )
        return build_response(policy.register_request(request))
    except Exception:
        logger.exception("Unhandled error while registering reminder")
        return HTTPStatus.INTERNAL_SERVER_ERROR, {"success": False, "error": "Serverfehler"}

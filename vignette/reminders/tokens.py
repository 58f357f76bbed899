"""Секреты для подтверждения double opt-in: токен ссылки и SMS-код."""

from __future__ import annotations

import secrets

TOKEN_BYTES = 32
SMS_CODE_DIGITS = 6
SMS_CODE_VALID_MINUTES = 10


def issue_confirmation_token(*, nbytes: int = TOKEN_BYTES) -> str:
    return secrets.token_hex(nbytes)


def issue_sms_code(*, digits: int = SMS_CODE_DIGITS) -> str:
    # Ведущие нули сохраняются: код всегда ровно из digits цифр.
    return str(secrets.randbelow(10 ** digits)).zfill(digits)

# /vignette/validation/plate_parser.py
"""Нормализация и разбор австрийских номерных знаков."""
from __future__ import annotations

import re
from typing import Optional, Union

from .base import FormatError, LicensePlate, PlateRules

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")
_LEADING_LETTERS = re.compile(r"^([A-Z]+)")


class PlateParser:
    """Превращает ввод пользователя в LicensePlate или FormatError."""

    def __init__(self, rules: Optional[PlateRules] = None) -> None:
        self.rules = rules or PlateRules()
        self.pattern = re.compile(self.rules.pattern)

    @staticmethod
    def normalize(text: str) -> str:
        # Остаются только ASCII-буквы и цифры; умлауты выбрасываются как разделители.
        return _NON_ALNUM.sub("", text or "").upper()

    def parse(self, raw: str) -> Union[LicensePlate, FormatError]:
        clean = self.normalize(raw)

        if not self.rules.min_length <= len(clean) <= self.rules.max_length:
            return FormatError(
                reason="length",
                detail=(
                    f"Kennzeichen '{raw}' muss {self.rules.min_length}-{self.rules.max_length} "
                    f"Zeichen haben (aktuell: {len(clean)})."
                ),
                raw=raw,
            )

        if not self.pattern.fullmatch(clean):
            return FormatError(
                reason="pattern",
                detail=(
                    f"Kennzeichen '{raw}' hat ungültiges Format. "
                    "Erwartet: Buchstaben-Zahlen-Buchstaben (z.B. W-123 oder KU-456AB)."
                ),
                raw=raw,
            )

        match = _LEADING_LETTERS.match(clean)
        region_code = match.group(1) if match else ""
        if len(region_code) > self.rules.max_region_length:
            return FormatError(
                reason="region_code_length",
                detail=(
                    f"Kennzeichen '{raw}' hat ungültiges Format. Bezirkscode '{region_code}' ist zu lang "
                    f"(max. {self.rules.max_region_length} Buchstaben erlaubt, z.B. W oder KU)."
                ),
                raw=raw,
            )

        return LicensePlate(formatted=clean, region_code=region_code)

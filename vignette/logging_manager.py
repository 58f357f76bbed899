"""Настройка логирования пакета."""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Mapping

ROOT_LOGGER = "vignette"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_EMAIL = re.compile(r"([A-Za-z0-9._%+-]{1,3})[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+)")
_PHONE = re.compile(r"(?<![\w+])(\+?\d{2})\d{2,10}(\d{3})\b")

_configured = False


def redact(text: str) -> str:
    """Маскирует адреса и телефоны, случайно попавшие в текст."""

    text = _EMAIL.sub(r"\1***@\2", text)
    return _PHONE.sub(r"\1***\2", text)


def _redact_arg(value):
    return redact(value) if isinstance(value, str) else value


class ContactMaskingFilter(logging.Filter):
    """Не пропускает в лог контактные данные в открытом виде."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(str(record.msg))
        if isinstance(record.args, Mapping):
            record.args = {key: _redact_arg(value) for key, value in record.args.items()}
        elif record.args:
            record.args = tuple(_redact_arg(arg) for arg in record.args)
        return True


def configure(level: str | None = None) -> None:
    global _configured

    logger = logging.getLogger(ROOT_LOGGER)
    level_name = (level or os.getenv("VIGNETTE_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(ContactMaskingFilter())
        logger.addHandler(handler)
        _configured = True


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        configure()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)

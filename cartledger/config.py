"""Runtime settings for receipts and the command line, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .result import Err, Ok, Result

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_env(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    currency: str = "EUR"
    decimals: int = 2
    log_level: str = "WARNING"

    @property
    def log_level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level]

    def money(self, amount: float) -> str:
        return f"{amount:.{self.decimals}f} {self.currency}"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Result["Settings", ValueError]:
        """Build settings from CARTLEDGER_* variables (and a .env file if present)."""
        if dotenv:
            load_dotenv()

        raw_decimals = _get_env("CARTLEDGER_DECIMALS", "2")
        try:
            decimals = int(raw_decimals)
        except ValueError:
            return Err(ValueError(f"CARTLEDGER_DECIMALS must be an integer, got {raw_decimals!r}"))
        if not 0 <= decimals <= 6:
            return Err(ValueError(f"CARTLEDGER_DECIMALS must be between 0 and 6, got {decimals}"))

        log_level = _get_env("CARTLEDGER_LOG_LEVEL", "WARNING").upper()
        if log_level not in _LOG_LEVELS:
            return Err(
                ValueError(
                    f"CARTLEDGER_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}"
                )
            )

        return Ok(
            cls(
                currency=_get_env("CARTLEDGER_CURRENCY", "EUR"),
                decimals=decimals,
                log_level=log_level,
            )
        )

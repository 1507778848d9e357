"""Product batch code parsing.

Batch codes are ten characters, ``YYMMDDXXXX``: the expiry date followed by
a four character plant code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..exceptions import ValidationError

_BATCH_PATTERN = re.compile(r"^(?P<yy>\d{2})(?P<mm>\d{2})(?P<dd>\d{2})(?P<plant>[A-Za-z0-9]{4})$")


@dataclass(frozen=True)
class BatchCode:
    """Parsed batch code."""

    raw: str
    expiry_date: date
    plant_code: str

    def is_expired(self, today: date | None = None) -> bool:
        return self.expiry_date < (today or date.today())


def parse_batch_code(raw: str) -> BatchCode:
    """Parse a ``YYMMDDXXXX`` batch code.

    Two-digit years above 50 are read as 19xx, the rest as 20xx.

    Raises:
        ValidationError: If the code is malformed or the date does not exist.

    Example:
        >>> parse_batch_code("2612311A2B").expiry_date
        datetime.date(2026, 12, 31)
    """
    text = (raw or "").strip()
    match = _BATCH_PATTERN.match(text)
    if match is None:
        raise ValidationError("Batch code must be 10 characters (YYMMDDXXXX)")
    yy = int(match["yy"])
    year = (1900 if yy > 50 else 2000) + yy
    try:
        expiry = date(year, int(match["mm"]), int(match["dd"]))
    except ValueError as exc:
        raise ValidationError(f"Batch code date (YYMMDD) is invalid: {text[:6]}") from exc
    return BatchCode(raw=text, expiry_date=expiry, plant_code=match["plant"])

"""
Indonesian locale formatting for prices and timestamps

Mirrors what the storefront front-end shows (``toLocaleString('id-ID')``):
dots group thousands, a comma separates decimals.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
from zoneinfo import ZoneInfo
import os

Number = Union[Decimal, int, float, str]

STORE_TIMEZONE = os.getenv("STORE_TIMEZONE", "Asia/Jakarta")

DAY_NAMES = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Coerce a number (or numeric string) to a Decimal, via str() for floats"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_number(value: Number) -> str:
    """Format a number the id-ID way: 1234567.5 -> '1.234.567,5'"""
    amount = to_decimal(value).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    integer_part, _, fraction = f"{abs(amount):f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    if fraction:
        return f"{sign}{grouped},{fraction}"
    return f"{sign}{grouped}"


def format_rupiah(value: Number) -> str:
    return f"Rp {format_number(value)}"


def as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive timestamp; SQLite hands them back without an offset"""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def format_order_time(moment: Optional[datetime] = None, tz_name: Optional[str] = None) -> str:
    """Long Indonesian date-time, e.g. 'Senin, 19 Oktober 2026 pukul 14.30.00'"""
    moment = as_utc(moment or datetime.now(timezone.utc))
    local = moment.astimezone(ZoneInfo(tz_name or STORE_TIMEZONE))
    return (
        f"{DAY_NAMES[local.weekday()]}, {local.day} {MONTH_NAMES[local.month - 1]} {local.year} "
        f"pukul {local:%H.%M.%S}"
    )

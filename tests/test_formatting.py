from datetime import datetime, timezone
from decimal import Decimal

from storefront.utils.formatting import format_number, format_order_time, format_rupiah, quantize_money


def test_format_number_groups_thousands_with_dots():
    assert format_number(100000) == "100.000"
    assert format_number(Decimal("1234567.00")) == "1.234.567"
    assert format_number(999) == "999"


def test_format_number_keeps_fraction_with_comma():
    assert format_number(Decimal("1234.5")) == "1.234,5"
    assert format_number(0.25) == "0,25"


def test_format_rupiah():
    assert format_rupiah(20000) == "Rp 20.000"


def test_quantize_money_rounds_half_up():
    assert quantize_money("10.005") == Decimal("10.01")
    assert quantize_money(3) == Decimal("3.00")


def test_order_time_in_store_timezone():
    moment = datetime(2026, 10, 19, 7, 30, 0, tzinfo=timezone.utc)
    assert format_order_time(moment, "Asia/Jakarta") == "Senin, 19 Oktober 2026 pukul 14.30.00"


def test_order_time_treats_naive_as_utc():
    moment = datetime(2026, 1, 4, 20, 5, 9)
    assert format_order_time(moment, "Asia/Jakarta") == "Senin, 5 Januari 2026 pukul 03.05.09"

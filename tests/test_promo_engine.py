from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.models.promo_code import PromoCode, DiscountType
from storefront.services.promo_engine import PromoRejected, compute_discount, evaluate_promo

NOW = datetime(2026, 10, 19, 7, 30, tzinfo=timezone.utc)


def make_promo(**fields):
    values = dict(
        code="SAVE10",
        discount_type="percentage",
        discount_value=Decimal("10"),
        min_purchase=None,
        max_discount=None,
        usage_limit=None,
        usage_count=0,
        start_date=None,
        end_date=None,
        enabled=True,
    )
    values.update(fields)
    return PromoCode(**values)


def test_percentage_discount_is_capped_by_max_discount():
    quote = evaluate_promo(make_promo(max_discount=Decimal("5000")), 100000, NOW)

    assert quote.discount_amount == Decimal("5000.00")
    assert quote.final_price == Decimal("95000.00")
    assert quote.original_price == Decimal("100000.00")
    assert quote.message == "Diskon 10% berhasil diterapkan!"


def test_fixed_discount_is_clamped_to_price():
    promo = make_promo(code="FLAT20K", discount_type="fixed", discount_value=Decimal("20000"))
    quote = evaluate_promo(promo, 15000, NOW)

    assert quote.discount_amount == Decimal("15000.00")
    assert quote.final_price == Decimal("0.00")
    assert quote.message == "Diskon Rp 20.000 berhasil diterapkan!"


def test_fixed_discount_ignores_max_discount():
    assert compute_discount(DiscountType.FIXED, 20000, 100000, max_discount=5000) == Decimal("20000.00")


def test_percentage_discount_rounds_to_cents():
    assert compute_discount(DiscountType.PERCENTAGE, Decimal("12.5"), Decimal("999.99")) == Decimal("125.00")


def test_final_price_never_negative():
    quote = evaluate_promo(make_promo(discount_value=Decimal("150")), 40000, NOW)
    assert quote.final_price == Decimal("0.00")
    assert quote.discount_amount == Decimal("40000.00")


def test_disabled_promo_rejected():
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(make_promo(enabled=False), 100000, NOW)
    assert exc_info.value.reason == PromoRejected.INACTIVE
    assert exc_info.value.message == "Kode promo tidak aktif"
    assert exc_info.value.status_code == 400


def test_promo_not_started_yet():
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(make_promo(start_date=NOW + timedelta(days=1)), 100000, NOW)
    assert exc_info.value.message == "Kode promo belum berlaku"


def test_expired_promo():
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(make_promo(end_date=NOW - timedelta(seconds=1)), 100000, NOW)
    assert exc_info.value.message == "Kode promo sudah kadaluarsa"


def test_naive_dates_are_read_as_utc():
    start = (NOW - timedelta(hours=1)).replace(tzinfo=None)
    end = (NOW + timedelta(hours=1)).replace(tzinfo=None)
    quote = evaluate_promo(make_promo(start_date=start, end_date=end), 100000, NOW)
    assert quote.discount_amount == Decimal("10000.00")


def test_usage_limit_reached():
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(make_promo(usage_limit=3, usage_count=3), 100000, NOW)
    assert exc_info.value.reason == PromoRejected.EXHAUSTED
    assert exc_info.value.message == "Kode promo sudah mencapai batas penggunaan"


def test_minimum_purchase_message_uses_id_locale():
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(make_promo(min_purchase=Decimal("50000")), 49999, NOW)
    assert exc_info.value.message == "Minimum pembelian Rp 50.000 untuk kode ini"


def test_disabled_check_runs_before_date_window():
    promo = make_promo(enabled=False, end_date=NOW - timedelta(days=1))
    with pytest.raises(PromoRejected) as exc_info:
        evaluate_promo(promo, 100000, NOW)
    assert exc_info.value.reason == PromoRejected.INACTIVE

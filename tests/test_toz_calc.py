"""
Toz hesabının birim testleri, değişmez ve sabit senaryo testleri.
"""
import math

import pytest
from toz_calc import (
    Toz,
    ALT_PERCENTAGES,
    ALT_TOTAL_PER_CHARIK,
    UST_PERCENTAGES,
    UST_TOTAL_PER_CHARIK,
    ALT_TOZ,
    UST_TOZ,
    COMPONENT_KEYS,
    sanitize_value,
    calculate_from_charik_count,
    calculate_from_one_value,
    toz_for_kind,
    toz_from_edit,
    check_toz_invariant,
    validate_toz_invariant,
)

WEIGHT_SETS = [
    (ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK),
    (UST_PERCENTAGES, UST_TOTAL_PER_CHARIK),
]


# --- sabitler ---


def test_weight_sets_sum_to_one():
    assert sum(ALT_PERCENTAGES.values()) == pytest.approx(1.0)
    assert sum(UST_PERCENTAGES.values()) == pytest.approx(1.0)


def test_kinds_use_fixed_constants():
    assert ALT_TOZ.weights == {"a": 0.5, "b": 0.39, "c": 0.06, "d": 0.05}
    assert ALT_TOZ.total_per_charik == 121
    assert UST_TOZ.weights == {"a": 0.3, "b": 0.6, "c": 0.06, "d": 0.04}
    assert UST_TOZ.total_per_charik == 45


# --- girdi temizleme ---


@pytest.mark.parametrize("raw,expected", [
    (3, 3.0), (2.5, 2.5), (0, 0.0), ("4", 4.0),
    (-5, 0.0), (float("nan"), 0.0), (float("inf"), 0.0),
    (None, 0.0), ("abc", 0.0), ("", 0.0),
])
def test_sanitize_value(raw, expected):
    assert sanitize_value(raw) == expected


# --- ileri hesap ---


def test_forward_alt_count_2():
    """Alt, charik 2 → toplam 242, a=121.0, b=94.38, c=14.52, d=12.10"""
    toz = calculate_from_charik_count(2, ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)
    assert toz.total == 242
    assert toz.a == pytest.approx(121.0)
    assert toz.b == pytest.approx(94.38)
    assert toz.c == pytest.approx(14.52)
    assert toz.d == pytest.approx(12.10)


def test_forward_ust_count_1():
    toz = toz_for_kind(UST_TOZ, 1)
    assert toz.total == 45
    assert toz.a == pytest.approx(13.5)
    assert toz.b == pytest.approx(27.0)
    assert toz.c == pytest.approx(2.7)
    assert toz.d == pytest.approx(1.8)


@pytest.mark.parametrize("percentages,per_charik", WEIGHT_SETS)
@pytest.mark.parametrize("count", [0, 1, 1.6529, 2, 7.25, 1000])
def test_forward_total_and_sum_invariant(percentages, per_charik, count):
    """toplam == charik başına toplam × n, bileşenlerin toplamı == toplam"""
    toz = calculate_from_charik_count(count, percentages, per_charik)
    assert toz.total == per_charik * count
    assert toz.a + toz.b + toz.c + toz.d == pytest.approx(toz.total)
    assert check_toz_invariant(toz)


def test_forward_negative_and_nan_treated_as_zero():
    assert calculate_from_charik_count(-5, ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK).total == 0
    toz = calculate_from_charik_count(float("nan"), UST_PERCENTAGES, UST_TOTAL_PER_CHARIK)
    assert toz == Toz(0.0, 0.0, 0.0, 0.0, 0.0)


# --- ters hesap ---


def test_inverse_alt_edit_b_78():
    """Alt b=78 → toplam 200, a=100, c=12, d=10, charik ≈ 1.6529"""
    toz, count = calculate_from_one_value("b", 78, ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)
    assert toz.total == pytest.approx(200)
    assert toz.a == pytest.approx(100)
    assert toz.b == pytest.approx(78)
    assert toz.c == pytest.approx(12)
    assert toz.d == pytest.approx(10)
    assert count == pytest.approx(200 / 121)
    assert count == pytest.approx(1.6529, abs=1e-4)


def test_inverse_ust_total_zero():
    """Üst toplam=0 → tüm bileşenler 0, charik 0 (sınırlama çağıranda)"""
    toz, count = toz_from_edit(UST_TOZ, "total", 0)
    assert toz == Toz(0.0, 0.0, 0.0, 0.0, 0.0)
    assert count == 0


@pytest.mark.parametrize("percentages,per_charik", WEIGHT_SETS)
@pytest.mark.parametrize("value", [0, 1, 45, 121, 242.5, 9999])
def test_inverse_total_is_exact(percentages, per_charik, value):
    toz, count = calculate_from_one_value("total", value, percentages, per_charik)
    assert toz.total == value
    assert count == pytest.approx(value / per_charik)
    assert check_toz_invariant(toz)


@pytest.mark.parametrize("percentages,per_charik", WEIGHT_SETS)
@pytest.mark.parametrize("key", COMPONENT_KEYS)
def test_inverse_edited_component_keeps_its_value(percentages, per_charik, key):
    toz, _ = calculate_from_one_value(key, 37.5, percentages, per_charik)
    assert toz.get(key) == pytest.approx(37.5)
    assert toz.a + toz.b + toz.c + toz.d == pytest.approx(toz.total)


@pytest.mark.parametrize("percentages,per_charik", WEIGHT_SETS)
@pytest.mark.parametrize("count", [0, 1, 2, 3.3])
def test_inverse_of_forward_total_matches_forward(percentages, per_charik, count):
    forward = calculate_from_charik_count(count, percentages, per_charik)
    toz, implied = calculate_from_one_value("total", forward.total, percentages, per_charik)
    for key in ("a", "b", "c", "d", "total"):
        assert toz.get(key) == pytest.approx(forward.get(key))
    assert implied == pytest.approx(count)


def test_inverse_negative_and_nan_treated_as_zero():
    toz, count = calculate_from_one_value("a", float("nan"), ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)
    assert toz.total == 0
    assert count == 0
    toz, count = calculate_from_one_value("total", -10, ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)
    assert toz.total == 0
    assert count == 0


def test_inverse_zero_weight_resolves_to_zero_total():
    """Oranı 0 olan alan düzenlenince toplam sonsuz/NaN olmaz, 0 olur"""
    weights = {"a": 0.7, "b": 0.3, "c": 0.0, "d": 0.0}
    toz, count = calculate_from_one_value("c", 50, weights, 10)
    assert toz.total == 0
    assert not math.isinf(toz.total) and not math.isnan(toz.total)
    assert count == 0


def test_inverse_zero_per_charik_total_gives_zero_count():
    toz, count = calculate_from_one_value("total", 100, ALT_PERCENTAGES, 0)
    assert toz.total == 100
    assert count == 0


def test_inverse_unknown_key_raises():
    with pytest.raises(KeyError):
        calculate_from_one_value("e", 10, ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)


# --- değişmez doğrulama ---


def test_validate_toz_invariant_ok():
    ok, msg = validate_toz_invariant(toz_for_kind(ALT_TOZ, 3))
    assert ok
    assert msg == ""


def test_validate_toz_invariant_mismatch():
    ok, msg = validate_toz_invariant(Toz(1.0, 1.0, 1.0, 1.0, 5.0))
    assert not ok
    assert "Değişmez ihlali" in msg


def test_validate_toz_invariant_negative():
    ok, msg = validate_toz_invariant(Toz(-1.0, 1.0, 0.0, 0.0, 0.0))
    assert not ok
    assert "negatif" in msg


def test_toz_get_unknown_key():
    with pytest.raises(KeyError):
        Toz(0.0, 0.0, 0.0, 0.0, 0.0).get("x")


def test_toz_as_dict():
    assert Toz(1.0, 2.0, 3.0, 4.0, 10.0).as_dict() == {"a": 1.0, "b": 2.0, "c": 3.0, "d": 4.0, "total": 10.0}

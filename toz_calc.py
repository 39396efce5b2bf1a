"""
Charik sayısı ile Alt/Üst Toz dağılımı arasındaki hesabın tek uygulaması.

Tanımlar:
  toplam(total) = charik başına toplam × charik sayısı
  bileşen(k)    = oran(k) × toplam          (k = a, b, c, d)
  Ters hesap: tek bir alan düzenlenince toplam geri çözülür,
  dört bileşen aynı orandan yeniden hesaplanır, charik sayısı = toplam ÷ charik başına toplam.
  Değişmez: a + b + c + d == total (kayan nokta toleransıyla)

Geçersiz girdi (sayı değil, NaN, sonsuz, negatif) hata fırlatmaz, 0 kabul edilir.
Bu modül dışında bu formülleri tekrar yazmayın.
"""
import math
from dataclasses import dataclass, asdict
from typing import Dict, Mapping, Tuple

COMPONENT_KEYS = ("a", "b", "c", "d")
FIELD_KEYS = COMPONENT_KEYS + ("total",)

ALT_PERCENTAGES = {"a": 0.5, "b": 0.39, "c": 0.06, "d": 0.05}
ALT_TOTAL_PER_CHARIK = 121
UST_PERCENTAGES = {"a": 0.3, "b": 0.6, "c": 0.06, "d": 0.04}
UST_TOTAL_PER_CHARIK = 45


@dataclass(frozen=True)
class Toz:
    a: float
    b: float
    c: float
    d: float
    total: float

    def get(self, key: str) -> float:
        if key not in FIELD_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class TozKind:
    """Bir toz türü: ekrandaki adı, oranları ve charik başına toplamı."""
    key: str
    label: str
    weights: Mapping[str, float]
    total_per_charik: float


ALT_TOZ = TozKind("alt", "Alt Toz", ALT_PERCENTAGES, ALT_TOTAL_PER_CHARIK)
UST_TOZ = TozKind("ust", "Üst Toz", UST_PERCENTAGES, UST_TOTAL_PER_CHARIK)
TOZ_KINDS = {ALT_TOZ.key: ALT_TOZ, UST_TOZ.key: UST_TOZ}


def sanitize_value(value) -> float:
    """Sayıya çevrilemeyen, NaN, sonsuz veya negatif değerleri 0.0 yapar."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or math.isinf(v) or v < 0:
        return 0.0
    return v


def _split_total(total: float, percentages: Mapping[str, float]) -> Toz:
    return Toz(
        a=percentages["a"] * total,
        b=percentages["b"] * total,
        c=percentages["c"] * total,
        d=percentages["d"] * total,
        total=total,
    )


def calculate_from_charik_count(
    count: float,
    percentages: Mapping[str, float],
    total_per_charik: float,
) -> Toz:
    """
    Charik sayısından toz dağılımını hesaplar (ileri hesap).

    Geçersiz sayı bu hesap için 0 kabul edilir; saklanan charik sayısı değişmez.

    Args:
        count: charik sayısı
        percentages: a/b/c/d oranları (toplamı 1)
        total_per_charik: bir chariğin katkısı

    Returns:
        Toz (a, b, c, d, total)
    """
    valid_count = sanitize_value(count)
    total = total_per_charik * valid_count
    return _split_total(total, percentages)


def calculate_from_one_value(
    changed_key: str,
    changed_value: float,
    percentages: Mapping[str, float],
    total_per_charik: float,
) -> Tuple[Toz, float]:
    """
    Tek bir alan düzenlendiğinde toplamı geri çözer, dağılımı ve charik sayısını döndürür (ters hesap).

    changed_key "total" ise toplam doğrudan değerdir; değilse değer ÷ oran.
    Oran tam 0 ise toplam 0 kabul edilir. Charik başına toplam 0 ise charik sayısı 0.
    Dönen charik sayısı sınırlanmamıştır; en az 1 kuralını çağıran uygular.

    Returns:
        (toz, charik_count)
    """
    if changed_key not in FIELD_KEYS:
        raise KeyError(changed_key)
    valid_value = sanitize_value(changed_value)
    if changed_key == "total":
        total = valid_value
    else:
        weight = percentages[changed_key]
        total = valid_value / weight if weight != 0 else 0.0
    toz = _split_total(total, percentages)
    charik_count = total / total_per_charik if total_per_charik != 0 else 0.0
    return toz, charik_count


def toz_for_kind(kind: TozKind, count: float) -> Toz:
    return calculate_from_charik_count(count, kind.weights, kind.total_per_charik)


def toz_from_edit(kind: TozKind, changed_key: str, changed_value: float) -> Tuple[Toz, float]:
    return calculate_from_one_value(changed_key, changed_value, kind.weights, kind.total_per_charik)


def check_toz_invariant(toz: Toz, rel_tol: float = 1e-9) -> bool:
    """
    Değişmez kontrolü (test ve hata ayıklama için).
    a + b + c + d == total (göreli toleransla) sağlanıyor mu.
    """
    parts = toz.a + toz.b + toz.c + toz.d
    return math.isclose(parts, toz.total, rel_tol=rel_tol, abs_tol=1e-9)


def validate_toz_invariant(toz: Toz) -> Tuple[bool, str]:
    """
    Bir dağılımın değişmezini doğrular, ekranda göstermek için neden metni döndürür.
    Returns:
        (ok, message): sağlanıyorsa (True, ""), değilse (False, neden).
    """
    for key in FIELD_KEYS:
        v = toz.get(key)
        if math.isnan(v) or math.isinf(v):
            return False, f"{key} değeri geçersiz: {v}"
        if v < 0:
            return False, f"{key} değeri negatif olamaz: {v}"
    if not check_toz_invariant(toz):
        parts = toz.a + toz.b + toz.c + toz.d
        return False, f"Değişmez ihlali: a+b+c+d={parts} ile total={toz.total} eşleşmiyor"
    return True, ""

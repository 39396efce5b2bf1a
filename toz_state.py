"""
Hesaplayıcı durumu ve düzenleme kuralları.

Durum üçlüsü (charik sayısı, Alt Toz, Üst Toz) yalnızca buradaki fonksiyonlarla
toz_calc üzerinden türetilir. Streamlit sayfası dönen CalculatorState'i
st.session_state'e olduğu gibi yazar.
"""
import logging
import math
import re
from dataclasses import dataclass

from toz_calc import (
    Toz,
    TozKind,
    TOZ_KINDS,
    ALT_TOZ,
    UST_TOZ,
    toz_for_kind,
    toz_from_edit,
)

logger = logging.getLogger(__name__)

MIN_CHARIK_COUNT = 1
INITIAL_CHARIK_COUNT = 1

# baştaki sayı kısmı okunur, gerisi yok sayılır
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class CalculatorState:
    charik_count: float
    alt: Toz
    ust: Toz

    def toz(self, kind_key: str) -> Toz:
        if kind_key == ALT_TOZ.key:
            return self.alt
        if kind_key == UST_TOZ.key:
            return self.ust
        raise KeyError(kind_key)


def clamp_charik_count(count) -> float:
    """Charik sayısını en az MIN_CHARIK_COUNT olacak şekilde sınırlar. Geçersiz değer → MIN."""
    try:
        v = float(count)
    except (TypeError, ValueError):
        return float(MIN_CHARIK_COUNT)
    if math.isnan(v) or math.isinf(v):
        return float(MIN_CHARIK_COUNT)
    return max(float(MIN_CHARIK_COUNT), v)


def _forward_state(count: float) -> CalculatorState:
    return CalculatorState(
        charik_count=count,
        alt=toz_for_kind(ALT_TOZ, count),
        ust=toz_for_kind(UST_TOZ, count),
    )


def initial_state(charik_count: float = INITIAL_CHARIK_COUNT) -> CalculatorState:
    return _forward_state(clamp_charik_count(charik_count))


def reset_state() -> CalculatorState:
    logger.debug("Hesaplayıcı sıfırlandı")
    return initial_state()


def apply_charik_count(count) -> CalculatorState:
    """
    Charik sayısı doğrudan düzenlendiğinde: en az 1'e sınırla, iki tozu da ileri hesapla.
    Önceki bir düzenlemenin ters hesap sonucu korunmaz, iki toz da yeniden hesaplanır.
    """
    clamped = clamp_charik_count(count)
    logger.debug("Charik sayısı %s → %s", count, clamped)
    return _forward_state(clamped)


def apply_toz_edit(
    state: CalculatorState,
    kind_key: str,
    field_key: str,
    value,
    propagate: bool = True,
) -> CalculatorState:
    """
    Bir tozun tek alanı düzenlendiğinde yeni durumu döndürür.

    - Düzenlenen toz, ters hesabın döndürdüğü dağılımı gösterir (yeniden ileri hesaplanmaz).
    - Ters hesabın charik sayısı en az 1'e sınırlanıp saklanır.
    - propagate=True: diğer toz yeni charik sayısından ileri hesaplanır.
      propagate=False: diğer toz olduğu gibi kalır.

    Düzenlenen alan 0 yapılırsa ekrandaki toz sıfır, saklanan charik sayısı 1 olur;
    bu fark bilerek korunur.
    """
    kind = TOZ_KINDS[kind_key]
    edited, implied = toz_from_edit(kind, field_key, value)
    count = clamp_charik_count(implied)
    logger.debug(
        "%s.%s = %s → toplam %s, charik %s (sınırlı %s)",
        kind.key, field_key, value, edited.total, implied, count,
    )
    if kind.key == ALT_TOZ.key:
        ust = toz_for_kind(UST_TOZ, count) if propagate else state.ust
        return CalculatorState(charik_count=count, alt=edited, ust=ust)
    alt = toz_for_kind(ALT_TOZ, count) if propagate else state.alt
    return CalculatorState(charik_count=count, alt=alt, ust=edited)


def implied_charik_count(toz: Toz, kind: TozKind) -> float:
    """Ekrandaki dağılımın ima ettiği charik sayısı (sınırlanmamış)."""
    if kind.total_per_charik == 0:
        return 0.0
    return toz.total / kind.total_per_charik


def parse_edit_value(text) -> float:
    """
    Düzenleme kutusundaki metni sayıya çevirir.

    Boş metin 0.0 olur. Ondalık virgül kabul edilir ("1,5" → 1.5).
    Baştaki sayı kısmı okunur ("12abc" → 12.0). Sayı yoksa NaN döner;
    NaN'ı toz_calc 0 kabul eder.
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)
    s = str(text).strip()
    if not s:
        return 0.0
    s = s.replace(",", ".", 1)
    m = _LEADING_NUMBER.match(s)
    if not m:
        return float("nan")
    return float(m.group(0))

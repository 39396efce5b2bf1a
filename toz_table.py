"""
Hesaplayıcı durumunu tablo / CSV biçimine çevirir.
"""
from __future__ import annotations
import math
from typing import List, Dict, Any

import pandas as pd

from toz_calc import Toz, TozKind, COMPONENT_KEYS, FIELD_KEYS, TOZ_KINDS
from toz_state import CalculatorState

FIELD_LABELS = {"a": "A", "b": "B", "c": "C", "d": "D", "total": "Toplam"}
COLUMN_LABELS = {
    "kind": "Toz",
    "field": "Bileşen",
    "ratio": "Oran (%)",
    "value": "Değer",
    "charik": "Charik Sayısı",
}


def format_value(value: Any, decimals: int = 2) -> str:
    """Ekranda gösterim: sabit ondalık. Sonsuz / NaN / sayı olmayan değer → 0."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        v = 0.0
    if math.isnan(v) or math.isinf(v):
        v = 0.0
    return f"{v:.{max(0, int(decimals))}f}"


def toz_to_rows(toz: Toz, kind: TozKind) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for key in FIELD_KEYS:
        ratio = kind.weights[key] * 100 if key in COMPONENT_KEYS else 100.0
        rows.append({
            COLUMN_LABELS["kind"]: kind.label,
            COLUMN_LABELS["field"]: FIELD_LABELS[key],
            COLUMN_LABELS["ratio"]: ratio,
            COLUMN_LABELS["value"]: toz.get(key),
        })
    return rows


def state_to_dataframe(state: CalculatorState, decimals: int = 2) -> pd.DataFrame:
    """İki tozun tüm alanlarını tek tabloda, değerler yuvarlanmış olarak döndürür."""
    rows: List[Dict[str, Any]] = []
    for kind in TOZ_KINDS.values():
        rows.extend(toz_to_rows(state.toz(kind.key), kind))
    df = pd.DataFrame(rows, columns=[
        COLUMN_LABELS["kind"], COLUMN_LABELS["field"], COLUMN_LABELS["ratio"], COLUMN_LABELS["value"],
    ])
    df[COLUMN_LABELS["value"]] = df[COLUMN_LABELS["value"]].round(decimals)
    df[COLUMN_LABELS["ratio"]] = df[COLUMN_LABELS["ratio"]].round(2)
    df[COLUMN_LABELS["charik"]] = round(state.charik_count, decimals)
    return df


def dataframe_to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8-sig")

"""
Ayar yönetimi modülü
Uygulama ayarları yerel JSON'dan okunur, Streamlit Secrets'taki [calculator] bölümü üzerine yazar.
Toz oranları ve charik başına toplamlar sabittir, burada ayarlanmaz (bkz. toz_calc).
"""
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

CONFIG_DIR = Path("config")
APP_SETTINGS_FILE = CONFIG_DIR / "app_settings.json"
SECRETS_SECTION = "calculator"

MAX_DECIMALS = 6

DEFAULT_APP_SETTINGS = {
    "decimals": 2,
    "propagate_edits": True,
    "initial_charik_count": 1,
}


def ensure_config_dir():
    CONFIG_DIR.mkdir(exist_ok=True)


# ================================================================
# Değer doğrulama
# ================================================================

def _coerce_decimals(v: Any) -> int:
    if isinstance(v, bool):
        raise ValueError(f"decimals sayı olmalı: {v!r}")
    n = int(v)
    if n < 0 or n > MAX_DECIMALS:
        raise ValueError(f"decimals 0..{MAX_DECIMALS} aralığında olmalı: {n}")
    return n


def _coerce_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "1", "yes", "evet"):
            return True
        if s in ("false", "0", "no", "hayır", "hayir"):
            return False
    if isinstance(v, int):
        return v != 0
    raise ValueError(f"true/false bekleniyordu: {v!r}")


def _coerce_charik_count(v: Any) -> float:
    if isinstance(v, bool):
        raise ValueError(f"initial_charik_count sayı olmalı: {v!r}")
    n = float(v)
    if not math.isfinite(n) or n < 1:
        raise ValueError(f"initial_charik_count en az 1 olmalı: {v!r}")
    return n


_COERCERS = {
    "decimals": _coerce_decimals,
    "propagate_edits": _coerce_bool,
    "initial_charik_count": _coerce_charik_count,
}


def _merge_settings(base: Dict[str, Any], overrides: Any, source: str) -> Dict[str, Any]:
    """Bilinen anahtarları doğrulayarak üzerine yazar. Geçersiz değer atlanır ve loglanır."""
    merged = dict(base)
    if not overrides:
        return merged
    if not hasattr(overrides, "items"):
        logger.warning("%s: ayarlar sözlük değil, yok sayıldı (%r)", source, type(overrides).__name__)
        return merged
    for key, value in overrides.items():
        coerce = _COERCERS.get(key)
        if coerce is None:
            logger.warning("%s: bilinmeyen ayar yok sayıldı: %s", source, key)
            continue
        try:
            merged[key] = coerce(value)
        except (TypeError, ValueError) as e:
            logger.warning("%s: %s için geçersiz değer, varsayılan kullanılıyor: %s", source, key, e)
    return merged


# ================================================================
# Yükleme / kaydetme
# ================================================================

def _load_settings_file() -> Dict[str, Any]:
    if not APP_SETTINGS_FILE.exists():
        return {}
    try:
        with open(APP_SETTINGS_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("%s okunamadı, varsayılanlar kullanılıyor: %s", APP_SETTINGS_FILE, e)
        return {}
    return data if isinstance(data, dict) else {}


def _get_secrets_settings(st_secrets) -> Any:
    """Secrets'tan [calculator] bölümünü alır. Secrets yoksa boş sözlük."""
    if st_secrets is None:
        return {}
    try:
        section = st_secrets.get(SECRETS_SECTION, {})
    except Exception as e:  # secrets.toml yoksa Streamlit FileNotFoundError vb. fırlatır
        logger.debug("Secrets okunamadı: %s", e)
        return {}
    return section if section else {}


def load_app_settings(st_secrets=None) -> Dict[str, Any]:
    """Varsayılanlar ← config/app_settings.json ← Secrets [calculator]. Hata fırlatmaz."""
    settings = dict(DEFAULT_APP_SETTINGS)
    settings = _merge_settings(settings, _load_settings_file(), str(APP_SETTINGS_FILE))
    settings = _merge_settings(settings, _get_secrets_settings(st_secrets), f"secrets[{SECRETS_SECTION}]")
    return settings


def save_app_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Bilinen anahtarları doğrulayıp JSON'a atomik olarak yazar. Kaydedilen ayarları döndürür."""
    to_save = {}
    for key, value in settings.items():
        coerce = _COERCERS.get(key)
        if coerce is None:
            continue
        to_save[key] = coerce(value)
    ensure_config_dir()
    tmp_path = APP_SETTINGS_FILE.with_suffix(".json.tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(to_save, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, APP_SETTINGS_FILE)
    return to_save


def load_app_settings_safe(st_secrets=None) -> Tuple[Dict[str, Any], Optional[Exception]]:
    """
    Ekran için ayar yükleme. Beklenmeyen bir hata olursa varsayılanları ve hatayı döndürür,
    hata gösterimi çağırana kalır.
    Returns:
        (settings, error): başarılıysa error None.
    """
    try:
        return load_app_settings(st_secrets), None
    except Exception as e:
        logger.exception("Ayarlar yüklenemedi, varsayılanlar kullanılıyor")
        return dict(DEFAULT_APP_SETTINGS), e

"""
Hata gösterimi için yardımcı.
Kullanıcıya üstte Türkçe neden, altta düzeltme için teknik ayrıntı gösterilir.
"""
def _reason_tr(e: Exception, context: str) -> str:
    """İstisna içeriğinden Türkçe bir neden metni tahmin eder."""
    s = (str(e) or "").lower()
    if isinstance(e, PermissionError) or "permission" in s or "izin" in s:
        return "Dosyaya erişim izni yok. Klasör izinlerini kontrol edin."
    if "json" in s or "decode" in s or "expecting" in s:
        return "Ayar dosyası okunamadı. config/app_settings.json içeriğini kontrol edin."
    if isinstance(e, (FileNotFoundError, OSError)) or "file" in s or "dosya" in s:
        return "Dosya işlemi başarısız oldu. Dosya yolunu ve disk durumunu kontrol edin."
    if isinstance(e, (ValueError, TypeError)) or "invalid" in s or "geçersiz" in s:
        return "Girilen değer geçersiz. Sayı biçimini kontrol edin."
    if context:
        return f"{context} sırasında bir hata oluştu."
    return "Beklenmeyen bir hata oluştu."


def format_error_display(e: Exception, context: str = "") -> str:
    """
    Kullanıcıya gösterilecek hata metnini oluşturur.
    Üstte Türkçe neden, altta "Ayrıntı (düzeltme için)" olarak teknik mesaj.
    """
    reason = _reason_tr(e, context)
    detail = str(e).strip() or "(ayrıntı yok)"
    return f"{reason}\n\nAyrıntı (düzeltme için): {detail}"

"""Customer-facing texts for booking rejections (en, vi, de)."""

from backend.app.core.config import settings

LOCALES = ("en", "vi", "de")

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "DateLocked": "Booking is not available for this date.",
        "SlotLocked": "This time slot is currently locked. Please select another time.",
        "InvalidInput": "Please check your booking details.",
        "Conflict": "This entry already exists.",
        "NotFound": "Not found.",
        "StorageError": "The booking service is temporarily unavailable. Please try again.",
    },
    "vi": {
        "DateLocked": "Không thể đặt lịch cho ngày này.",
        "SlotLocked": "Khung giờ này hiện đang bị khóa. Vui lòng chọn khung giờ khác.",
        "InvalidInput": "Vui lòng kiểm tra lại thông tin đặt lịch.",
        "Conflict": "Mục này đã tồn tại.",
        "NotFound": "Không tìm thấy.",
        "StorageError": "Hệ thống đặt lịch tạm thời không khả dụng. Vui lòng thử lại.",
    },
    "de": {
        "DateLocked": "Buchungen sind für dieses Datum nicht verfügbar.",
        "SlotLocked": "Dieser Zeitraum ist gesperrt",
        "InvalidInput": "Bitte überprüfen Sie Ihre Buchungsdaten.",
        "Conflict": "Dieser Eintrag existiert bereits.",
        "NotFound": "Nicht gefunden.",
        "StorageError": "Der Buchungsdienst ist vorübergehend nicht erreichbar. Bitte versuchen Sie es erneut.",
    },
}


def pick_locale(lang: str | None, accept_language: str | None) -> str:
    """``lang`` wins, then the first supported Accept-Language tag, then the default."""
    if lang and lang.lower() in LOCALES:
        return lang.lower()
    for part in (accept_language or "").split(","):
        tag = part.split(";")[0].strip().lower()[:2]
        if tag in LOCALES:
            return tag
    return settings.DEFAULT_LOCALE if settings.DEFAULT_LOCALE in LOCALES else "de"


def message_for(code: str, locale: str) -> str:
    return MESSAGES.get(locale, MESSAGES["de"]).get(code, code)

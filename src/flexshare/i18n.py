"""Internationalization (i18n) support using gettext."""

import gettext as gettext_module
import logging
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

DOMAIN = "flexshare"
LOCALE_DIR = Path(__file__).parent / "locales"

# Thread-local storage for translations
_thread_local = threading.local()

_ui_language = "en"


def initialize(ui_language: str = "en") -> None:
    """Initialize translation system with language configuration.

    Call once at application startup. Validation messages produced before
    this call fall back to English.

    Args:
        ui_language: Language code for validation messages
    """
    global _ui_language

    _ui_language = ui_language

    logger.debug("Translation initialized: UI=%s", ui_language)


def _get_translation() -> gettext_module.NullTranslations:
    if getattr(_thread_local, "language", None) != _ui_language:
        _thread_local.translation = _load_translation(_ui_language)
        _thread_local.language = _ui_language
    return _thread_local.translation


def gettext(message: str) -> str:
    """Translate a UI message (validation errors, CLI output).

    Args:
        message: Message to translate

    Returns:
        Translated message
    """
    return _get_translation().gettext(message)


def _load_translation(language: str | None = None) -> gettext_module.NullTranslations:
    """Load gettext translation object with fallback.

    Args:
        language: Language code (e.g., "zh_TW", "en")
                 If None, returns NullTranslations (fallback to msgid)
    """
    if not language:
        return gettext_module.NullTranslations()

    try:
        return gettext_module.translation(
            domain=DOMAIN,
            localedir=str(LOCALE_DIR),
            languages=[language],
            fallback=True,
        )
    except Exception as e:
        logger.warning("Failed to load translation for %s: %s, using fallback", language, e)
        return gettext_module.NullTranslations()

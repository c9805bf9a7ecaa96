# tests/test_i18n.py
from app.i18n import SUPPORTED_LANGUAGES, TRANSLATIONS, normalize_language, translate


def test_exact_language():
    assert translate("chat.section.idea", "en") == "What & for whom"


def test_region_tag_falls_back_to_primary_subtag():
    assert translate("chat.readyPrompt", "fi-FI") == TRANSLATIONS["fi"]["chat.readyPrompt"]


def test_missing_key_falls_back_to_english():
    assert translate("upload.needMoreInfo", "sv") == TRANSLATIONS["en"]["upload.needMoreInfo"]


def test_unknown_language_falls_back_to_english():
    assert translate("chat.section.money", "xx") == "Money & funding"


def test_unknown_key_returns_key():
    assert translate("no.such.key", "fi") == "no.such.key"


def test_every_language_has_the_core_keys():
    for lang in SUPPORTED_LANGUAGES:
        for key in ("home.onboardingQuestion", "chat.readyPrompt", "chat.section.contact"):
            assert key in TRANSLATIONS[lang], (lang, key)


def test_normalize_language():
    assert normalize_language("sv_SE") == "sv"
    assert normalize_language("FA") == "fa"
    assert normalize_language("de") == "en"
    assert normalize_language(None) == "en"

# app/i18n.py
"""
Display strings the backend itself emits into the transcript.

Lookup never fails: requested language -> its primary subtag
("fi-FI" -> "fi") -> English -> the key itself.
"""
from __future__ import annotations

from typing import Dict, Optional

SUPPORTED_LANGUAGES = ("fi", "en", "sv", "ar", "ru", "fa")
DEFAULT_LANGUAGE = "en"

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "home.onboardingQuestion": (
            "Do you already have a registered company or business ID (Y‑tunnus)? "
            "Or are you just starting a new business?"
        ),
        "chat.readyPrompt": (
            "You’ve now covered all the key topics. Next we can confirm your "
            "details and book a time with a business advisor."
        ),
        "upload.enoughInfoQuestion": (
            "Do you have any worries, questions, or specific topics you want to "
            "highlight to the business advisor?"
        ),
        "upload.needMoreInfo": (
            "I've read your documents. They’re a good start, but we still need "
            "to clarify a few things together."
        ),
        "chat.section.basics": "Basic info & company status",
        "chat.section.idea": "What & for whom",
        "chat.section.how": "How it works",
        "chat.section.money": "Money & funding",
        "chat.section.special": "Special topics",
        "chat.section.contact": "Contact & summary",
    },
    "fi": {
        "home.onboardingQuestion": (
            "Onko sinulla jo rekisteröity yritys tai Y‑tunnus? "
            "Vai oletko aloittamassa uutta yritystä?"
        ),
        "chat.readyPrompt": (
            "Olet nyt käynyt läpi keskeiset aiheet. Seuraavaksi varmistetaan "
            "tietosi ja varataan aika yritysneuvojalle."
        ),
        "upload.enoughInfoQuestion": (
            "Onko sinulla huolia, kysymyksiä tai aiheita, jotka haluat nostaa "
            "esiin neuvojalle?"
        ),
        "upload.needMoreInfo": (
            "Luimme dokumenttisi. Ne ovat hyvä alku, mutta täydennetään vielä "
            "muutama asia yhdessä."
        ),
        "chat.section.basics": "Perustiedot ja yrityksen tila",
        "chat.section.idea": "Mitä ja kenelle",
        "chat.section.how": "Miten se toimii",
        "chat.section.money": "Raha ja rahoitus",
        "chat.section.special": "Erityisaiheet",
        "chat.section.contact": "Yhteystiedot ja yhteenveto",
    },
    "sv": {
        "home.onboardingQuestion": (
            "Har du redan ett registrerat företag eller FO-nummer (Y‑tunnus), "
            "eller är du på väg att starta nytt?"
        ),
        "chat.readyPrompt": (
            "Du har nu gått igenom de viktigaste delarna. Låt oss bekräfta dina "
            "uppgifter och boka tid hos en rådgivare."
        ),
        "chat.section.basics": "Grundinfo & företagsstatus",
        "chat.section.idea": "Vad & för vem",
        "chat.section.how": "Hur det fungerar",
        "chat.section.money": "Pengar & finansiering",
        "chat.section.special": "Särskilda ämnen",
        "chat.section.contact": "Kontakt & sammanfattning",
    },
    "ar": {
        "home.onboardingQuestion": (
            "هل لديك شركة مسجلة أو رقم عمل (Y‑tunnus)؟ أم أنك تبدأ نشاطًا تجاريًا جديدًا؟"
        ),
        "chat.readyPrompt": (
            "لقد غطّيت الآن المواضيع الأساسية. لنؤكد بياناتك ونحجز موعدًا مع مستشار الأعمال."
        ),
        "chat.section.basics": "المعلومات الأساسية وحالة الشركة",
        "chat.section.idea": "ماذا ولمن",
        "chat.section.how": "كيف يعمل",
        "chat.section.money": "المال والتمويل",
        "chat.section.special": "مواضيع خاصة",
        "chat.section.contact": "التواصل والملخص",
    },
    "ru": {
        "home.onboardingQuestion": (
            "У вас уже есть зарегистрированная компания или бизнес‑ID (Y‑tunnus)? "
            "Или вы только начинаете новый бизнес?"
        ),
        "chat.readyPrompt": (
            "Вы прошли основные темы. Давайте подтвердим ваши данные и запишемся "
            "на встречу с консультантом."
        ),
        "chat.section.basics": "Основная информация и статус компании",
        "chat.section.idea": "Что и для кого",
        "chat.section.how": "Как это работает",
        "chat.section.money": "Деньги и финансирование",
        "chat.section.special": "Особые темы",
        "chat.section.contact": "Контакты и резюме",
    },
    "fa": {
        "home.onboardingQuestion": (
            "آیا از قبل شرکت ثبت‌شده یا شناسهٔ تجاری (Y‑tunnus) دارید؟ "
            "یا تازه می‌خواهید کسب‌وکار جدیدی شروع کنید؟"
        ),
        "chat.readyPrompt": (
            "اکنون موضوعات اصلی را پوشش داده‌ایم. بیایید اطلاعاتت را تأیید کنیم و وقت ملاقات رزرو کنیم."
        ),
        "chat.section.basics": "اطلاعات پایه و وضعیت شرکت",
        "chat.section.idea": "چه و برای چه کسی",
        "chat.section.how": "چگونه کار می‌کند",
        "chat.section.money": "پول و تأمین مالی",
        "chat.section.special": "موضوعات ویژه",
        "chat.section.contact": "اطلاعات تماس و خلاصه",
    },
}


def normalize_language(value: Optional[str]) -> str:
    """Map any language tag onto a supported UI language, English if unknown."""
    if not value:
        return DEFAULT_LANGUAGE
    lower = value.strip().lower()
    primary = lower.replace("_", "-").split("-")[0]
    if primary in SUPPORTED_LANGUAGES:
        return primary
    return DEFAULT_LANGUAGE


def translate(key: str, lang: Optional[str] = None) -> str:
    candidates = []
    if lang:
        lower = lang.strip().lower()
        candidates.append(lower)
        candidates.append(lower.replace("_", "-").split("-")[0])
    candidates.append(DEFAULT_LANGUAGE)

    for candidate in candidates:
        text = TRANSLATIONS.get(candidate, {}).get(key)
        if text is not None:
            return text
    return key

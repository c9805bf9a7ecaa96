# app/intake/readiness.py
"""
Readiness heuristic: has the interview covered what the advisor needs?

Two independent signals must agree:
  - content: every topic group has at least one whole-word keyword hit
    somewhere in the transcript
  - progression: the early phases have all been entered at least once

The keyword lists are plain data. Extending a language means editing
TOPIC_KEYWORDS, not the functions below. A trailing "*" marks a stem
("kohderyh*" matches "kohderyhmä", "kohderyhmille", ...).
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Pattern, Tuple

from app.intake.phases import Phase
from app.intake.state import Turn

KEYWORDS_VERSION = 3

TOPIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "what_sell": (
        # en
        "what", "product", "products", "service", "services",
        # fi
        "mitä", "tuot*", "palvelu*",
        # sv
        "produkt*", "tjänst*",
    ),
    "to_whom": (
        "to whom", "customer", "customers", "target", "segment*",
        "asiakas", "asiakkaat", "asiakkai*", "kohderyh*",
        "kund*", "målgrupp*",
    ),
    "how": (
        "how", "channel*", "store", "delivery", "operations",
        "myyn*", "kanava*", "verkkokaup*", "toimitus", "toiminta",
        "leverans", "webbutik*",
    ),
    "money": (
        "price", "pricing", "budget", "cost", "costs", "revenue", "funding",
        "tulo*", "kustannu*", "rahoitus", "kassavirta",
        "pris*", "kostnad*", "finansiering",
    ),
    "company_form": (
        "company form", "sole trader", "limited company",
        "toiminim*", "osakeyhti*", "oy", "osuuskun*", "ky", "ay",
        "enskild firma", "aktiebolag", "ab",
    ),
    "company_form_unsure": (
        "not sure", "en tiedä", "epävarma",
        "vet inte", "osäker",
    ),
    "no_special_topics": (
        "no special", "ei erityistä", "ei erityisiä",
        "inga särskilda",
    ),
}

CONTENT_TOPICS = ("what_sell", "to_whom", "how", "money")

REQUIRED_PHASES = (Phase.BASICS, Phase.IDEA, Phase.HOW, Phase.MONEY)


def _keyword_regex(keyword: str) -> str:
    stem = keyword.endswith("*")
    words = keyword.rstrip("*").split()
    body = r"\s+".join(re.escape(w) for w in words)
    return body + r"\w*" if stem else body


@lru_cache(maxsize=None)
def _topic_pattern(keywords: Tuple[str, ...]) -> Pattern[str]:
    alternatives = "|".join(_keyword_regex(k) for k in keywords)
    return re.compile(rf"\b(?:{alternatives})\b")


def mentions_topic(text: str, topic: str) -> bool:
    """Whole-word, case-insensitive test of one topic group against `text`."""
    return bool(_topic_pattern(TOPIC_KEYWORDS[topic]).search(text.lower()))


def transcript_blob(turns: Iterable[Turn]) -> str:
    return " ".join(t.content.lower() for t in turns)


@dataclass
class ReadinessReport:
    topics: Dict[str, bool] = field(default_factory=dict)
    phases_complete: bool = False

    @property
    def content_complete(self) -> bool:
        has_form = self.topics.get("company_form") or self.topics.get(
            "company_form_unsure"
        )
        return bool(has_form) and all(self.topics.get(t) for t in CONTENT_TOPICS)

    @property
    def ready(self) -> bool:
        return self.phases_complete and self.content_complete

    def missing(self) -> list[str]:
        gaps = [t for t in CONTENT_TOPICS if not self.topics.get(t)]
        if not (self.topics.get("company_form") or self.topics.get("company_form_unsure")):
            gaps.append("company_form")
        if not self.phases_complete:
            gaps.append("phases")
        return gaps


def evaluate_readiness(
    turns: Iterable[Turn],
    visited_phases: Mapping[Phase, bool],
) -> ReadinessReport:
    blob = transcript_blob(turns)
    topics = {name: mentions_topic(blob, name) for name in TOPIC_KEYWORDS}

    phases_complete = all(visited_phases.get(p) for p in REQUIRED_PHASES) and (
        bool(visited_phases.get(Phase.SPECIAL)) or topics["no_special_topics"]
    )
    return ReadinessReport(topics=topics, phases_complete=phases_complete)


def is_ready(turns: Iterable[Turn], visited_phases: Mapping[Phase, bool]) -> bool:
    """
    True iff the transcript covers every content topic and the required
    phases have been visited. Conservative: any missing signal means False.
    """
    return evaluate_readiness(turns, visited_phases).ready

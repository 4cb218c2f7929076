"""
Bullying detection.

A single incident is not bullying: the detector looks for a behaviour pattern combined with
repetition, victim signals or emotional harm. `detect_bullying` analyses one message;
`mentions_bullying` and `bullying_severity` scan the user turns of a whole transcript.
"""

import re
from enum import Enum
from itertools import chain
from typing import Iterable, Literal

from pydantic import BaseModel, Field


class BullyingSeverity(Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class BullyingIndicators(BaseModel):
    behavior: list[str] = Field(default_factory=list)
    context: list[str] = Field(default_factory=list)
    victim_signals: list[str] = Field(default_factory=list)
    emotions: list[str] = Field(default_factory=list)


class BullyingDetectionResult(BaseModel):
    is_bullying: bool = False
    severity: BullyingSeverity = BullyingSeverity.NONE
    is_structural: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    indicators: BullyingIndicators = Field(default_factory=BullyingIndicators)
    reasoning: str = ""


BEHAVIOR_PATTERNS: dict[str, tuple[str, ...]] = {
    "verbal": (
        "uitschelden",
        "uitgescholden",
        "schelden",
        "bedreigen",
        "bedreigd",
        "dreigen",
        "belachelijk maken",
        "belachelijk gemaakt",
        "lachen om",
        "lachen me uit",
        "uitlachen",
        "uitgelachen",
        "kleineren",
        "kleinerend",
        "vernederen",
        "vernederd",
        "pesten",
        "gepest",
        "treiteren",
        "getreiter",
    ),
    "social": (
        "buitensluiten",
        "buitengesloten",
        "negeren",
        "genegeerd",
        "niemand wil met mij",
        "niemand praat met mij",
        "ik hoor er niet bij",
        "ze laten me links liggen",
        "roddelen",
        "geroddel",
        "praatjes verspreiden",
    ),
    "cyber": (
        "cyberpesten",
        "online pesten",
        "screenshots delen",
        "screenshot gedeeld",
        "groepschat",
        "appgroep",
        "uit de groep",
        "verwijderd uit groep",
        "nare berichten",
        "gemene berichten",
    ),
}

CONTEXT_SIGNALS: dict[str, tuple[str, ...]] = {
    "location": (
        "klas",
        "in de klas",
        "op school",
        "pauze",
        "in de pauze",
        "gang",
        "schoolplein",
        "online",
        "whatsapp",
        "snapchat",
        "instagram",
        "tiktok",
        "appgroep",
        "groepschat",
    ),
    "frequency": (
        "altijd",
        "steeds",
        "elke dag",
        "iedere dag",
        "constant",
        "continu",
        "de hele tijd",
        "weer",
        "opnieuw",
        "blijven",
        "al weken",
        "al maanden",
        "sinds",
    ),
    "group": (
        "groep",
        "een groep",
        "ze",
        "zij",
        "iedereen",
        "hele klas",
        "klasgenoten",
        "medeleerlingen",
    ),
}

VICTIM_SIGNALS: tuple[str, ...] = (
    "ik hoor er niet bij",
    "ze lachen om mij",
    "ze lachen me uit",
    "ik word genegeerd",
    "niemand wil met mij",
    "niemand praat met mij",
    "ik durf niks te zeggen",
    "ik durf niet",
    "ik wil niet meer naar school",
    "ik wil niet naar school",
    "ik ben bang om naar school te gaan",
    "ik haat school",
    "ik voel me waardeloos",
    "ik voel me alleen",
    "niemand mag mij",
    "iedereen haat mij",
    "ze hebben een hekel aan mij",
)

EMOTIONAL_INDICATORS: tuple[str, ...] = (
    "bang",
    "angstig",
    "verdrietig",
    "onzeker",
    "alleen",
    "eenzaam",
    "schaamte",
    "schaam me",
    "machteloos",
    "hulpeloos",
    "waardeloos",
    "niet goed genoeg",
    "minderwaardig",
    "depressief",
    "somber",
    "down",
)

BEHAVIOR_WEIGHT = 0.4
CONTEXT_WEIGHT = 0.2
VICTIM_WEIGHT = 0.25
EMOTION_WEIGHT = 0.15
MIN_CONFIDENCE = 0.4


def _matches(message: str, patterns: Iterable[str]) -> list[str]:
    return [pattern for pattern in patterns if pattern in message]


def detect_bullying(message: str) -> BullyingDetectionResult:
    """Detect bullying patterns in a single user message."""
    lower_message = message.lower()

    indicators = BullyingIndicators(
        behavior=_matches(lower_message, chain.from_iterable(BEHAVIOR_PATTERNS.values())),
        context=_matches(lower_message, chain.from_iterable(CONTEXT_SIGNALS.values())),
        victim_signals=_matches(lower_message, VICTIM_SIGNALS),
        emotions=_matches(lower_message, EMOTIONAL_INDICATORS),
    )

    has_behavior = bool(indicators.behavior)
    has_context = bool(indicators.context)
    has_victim_signal = bool(indicators.victim_signals)
    has_emotion = bool(indicators.emotions)

    confidence = 0.0
    if has_behavior:
        confidence += BEHAVIOR_WEIGHT
    if has_context:
        confidence += CONTEXT_WEIGHT
    if has_victim_signal:
        confidence += VICTIM_WEIGHT
    if has_emotion:
        confidence += EMOTION_WEIGHT
    confidence = min(round(confidence, 2), 1.0)

    has_repetition = any(word in lower_message for word in CONTEXT_SIGNALS["frequency"])
    is_structural = has_repetition and has_behavior
    has_impact = has_victim_signal or has_emotion
    is_bullying = has_behavior and (has_repetition or has_impact) and confidence >= MIN_CONFIDENCE

    if not is_bullying:
        severity = BullyingSeverity.NONE
    elif is_structural and has_victim_signal and has_emotion:
        severity = BullyingSeverity.CRITICAL
    elif is_structural or (has_victim_signal and has_emotion):
        severity = BullyingSeverity.HIGH
    elif has_victim_signal or has_emotion:
        severity = BullyingSeverity.MEDIUM
    else:
        severity = BullyingSeverity.LOW

    if is_bullying:
        parts = []
        if has_behavior:
            parts.append(f"gedrag ({len(indicators.behavior)}x)")
        if has_context:
            parts.append(f"context ({len(indicators.context)}x)")
        if has_victim_signal:
            parts.append(f"slachtoffersignalen ({len(indicators.victim_signals)}x)")
        if has_emotion:
            parts.append(f"emoties ({len(indicators.emotions)}x)")
        if is_structural:
            parts.append("STRUCTUREEL")
        reasoning = f"Pesten gedetecteerd: {' + '.join(parts)}. Severity: {severity.value}. Confidence: {round(confidence * 100)}%."
    elif has_behavior and not has_repetition and not has_impact:
        reasoning = "Enkel incident zonder herhaling of impact → GEEN pesten (nog)."
    else:
        reasoning = "Geen pesten-indicatoren gedetecteerd."

    return BullyingDetectionResult(
        is_bullying=is_bullying,
        severity=severity,
        is_structural=is_structural,
        confidence=confidence,
        indicators=indicators,
        reasoning=reasoning,
    )


def recommended_bullying_action(severity: BullyingSeverity) -> str:
    match severity:
        case BullyingSeverity.CRITICAL:
            return "URGENT: Directe interventie nodig. Adviseer contact met vertrouwenspersoon, ouders, of hulplijn (Kindertelefoon 0800-0432)."
        case BullyingSeverity.HIGH:
            return "Serieus: Adviseer gesprek met mentor, vertrouwenspersoon, of ouders. Monitor situatie actief."
        case BullyingSeverity.MEDIUM:
            return "Aandacht: Adviseer gesprek met vertrouwenspersoon. Bied concrete tips voor assertiviteit."
        case BullyingSeverity.LOW:
            return "Waakzaam: Monitor situatie. Bied tips voor omgaan met conflict."
        case _:
            return "Geen actie nodig."


# Transcript-level keyword scan, matched on word starts so "gepest" also catches "gepeste".
BULLYING_KEYWORDS: tuple[str, ...] = (
    "pesten", "gepest", "pest", "pester", "pesters", "pestgedrag",
    "cyberpesten", "online pesten", "digitaal pesten",
    "uitlachen", "uitgelachen", "lachen om", "belachelijk maken",
    "negeren", "genegeerd", "doen alsof ik lucht ben",
    "buitensluiten", "buitengesloten", "niet meedoen", "niet uitgenodigd",
    "roddelen", "roddel", "achter mijn rug", "praatjes", "geruchten",
    "screenshots delen", "screenshot", "doorsturen", "foto's delen",
    "uit de groep", "groepschat",
    "gemeen", "gemene dingen", "gemeen doen", "rot doen",
    "plagen", "geplaagd", "sarren", "treiteren", "treiteraar",
    "schelden", "gescholden", "uitschelden", "scheldwoorden",
    "bedreigen", "bedreigd", "bang maken", "intimideren",
    "slaan", "schoppen", "duwen", "fysiek", "geweld",
    "spullen pakken", "afpakken", "verstopt", "kapot maken",
    "verraad", "geheim doorverteld",
    "niet durven", "bang op school", "niet naar school willen",
    "voor gek gezet", "vernederd", "beschaamd",
)

HIGH_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "bedreigen", "bedreigd", "bang maken", "intimideren",
    "slaan", "schoppen", "duwen", "fysiek", "geweld",
    "niet naar school willen", "bang op school",
    "zelfmoord", "dood", "pijn doen",
)

MEDIUM_SEVERITY_KEYWORDS: tuple[str, ...] = (
    "cyberpesten", "screenshots delen", "doorsturen",
    "uit de groep", "buitengesloten",
    "schelden", "gescholden", "uitschelden",
    "vernederd", "beschaamd", "voor gek gezet",
)


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"\b(?:{alternatives})\w*\b", re.IGNORECASE)


_BULLYING_PATTERN = _keyword_pattern(BULLYING_KEYWORDS)
_HIGH_SEVERITY_PATTERN = _keyword_pattern(HIGH_SEVERITY_KEYWORDS)
_MEDIUM_SEVERITY_PATTERN = _keyword_pattern(MEDIUM_SEVERITY_KEYWORDS)


def _user_text(messages: Iterable[dict[str, str]]) -> str:
    return " ".join(m["content"].lower() for m in messages if m.get("role") == "user")


def mentions_bullying(messages: Iterable[dict[str, str]]) -> bool:
    """Whether any user turn of the transcript mentions bullying."""
    text = _user_text(messages)
    if not text.strip():
        return False
    return _BULLYING_PATTERN.search(text) is not None


def bullying_severity(messages: Iterable[dict[str, str]]) -> Literal["low", "medium", "high"]:
    """Coarse severity of the bullying mentioned across the user turns of a transcript."""
    text = _user_text(messages)
    if _HIGH_SEVERITY_PATTERN.search(text):
        return "high"
    if _MEDIUM_SEVERITY_PATTERN.search(text):
        return "medium"
    return "low"

"""
Crisis detection for high-risk messages.

Scans a single user message for suicidality, self-harm, abuse and severe violence.
Keyword tiers are checked from critical down to medium, and within a tier the categories
in that order; the first hit decides the result.
"""

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field


class CrisisType(Enum):
    SUICIDALITY = "suicidality"
    SELF_HARM = "self_harm"
    ABUSE = "abuse"
    SEVERE_VIOLENCE = "severe_violence"
    NONE = "none"


class CrisisSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Referral(Enum):
    NONE = "none"
    SUICIDE_PREVENTION = "113_suicide_prevention"
    EMERGENCY = "112_emergency"
    VEILIG_THUIS = "veilig_thuis"
    HUISARTS = "huisarts"


class CrisisDetectionResult(BaseModel):
    detected: bool = False
    type: CrisisType = CrisisType.NONE
    severity: CrisisSeverity = CrisisSeverity.LOW
    matched_keywords: list[str] = Field(default_factory=list)
    requires_immediate_action: bool = False
    recommended_referral: Referral = Referral.NONE


class KeywordTiers(NamedTuple):
    critical: tuple[str, ...]
    high: tuple[str, ...]
    medium: tuple[str, ...]


SUICIDALITY_KEYWORDS = KeywordTiers(
    critical=(
        "ik wil dood",
        "ik ga dood",
        "ik maak mezelf dood",
        "ik pleeg zelfmoord",
        "ik spring van",
        "ik neem pillen",
        "ik hang mezelf",
        "vandaag is mijn laatste dag",
        "afscheidsbrief",
    ),
    high=(
        "zelfmoord",
        "suïcide",
        "dood willen",
        "niet meer willen leven",
        "beter af zonder mij",
        "niemand zou me missen",
        "iedereen is beter af als ik er niet ben",
        "ik wil niet meer",
        "het houdt niet op",
        "geen uitweg",
    ),
    medium=(
        "doodgaan",
        "niet meer wakker worden",
        "alles stoppen",
        "een einde maken",
        "verdwijnen",
        "weg willen",
    ),
)

SELF_HARM_KEYWORDS = KeywordTiers(
    critical=(
        "ik snij mezelf",
        "ik brand mezelf",
        "ik sla mezelf",
        "ik doe mezelf pijn",
        "ik heb mezelf gesneden",
    ),
    high=(
        "snijden",
        "cutter",
        "zelfverwonding",
        "mezelf pijn doen",
        "mezelf verwonden",
        "bloed",
        "littekens",
        "scheermesje",
        "mes",
    ),
    medium=(
        "pijn voelen",
        "mezelf straffen",
        "ik verdien pijn",
    ),
)

ABUSE_KEYWORDS = KeywordTiers(
    critical=(
        "hij slaat me",
        "zij slaat me",
        "mijn vader slaat me",
        "mijn moeder slaat me",
        "hij heeft me aangeraakt",
        "zij heeft me aangeraakt",
        "verkracht",
        "misbruikt",
        "gedwongen tot seks",
    ),
    high=(
        "slaan",
        "schoppen",
        "stompen",
        "wurgen",
        "aanraken",
        "betasten",
        "seksueel misbruik",
        "huiselijk geweld",
        "kindermishandeling",
        "incest",
    ),
    medium=(
        "bang voor thuis",
        "bang voor mijn vader",
        "bang voor mijn moeder",
        "durft niet naar huis",
        "schreeuwt altijd",
        "vernederd",
        "uitgescholden",
    ),
)

SEVERE_VIOLENCE_KEYWORDS = KeywordTiers(
    critical=(
        "in elkaar geslagen",
        "met mes bedreigd",
        "met wapen bedreigd",
        "bang voor mijn leven",
        "ze gaan me vermoorden",
    ),
    high=(
        "bedreigd",
        "geslagen",
        "gewond",
        "blauwe plekken",
        "gebroken",
        "ziekenhuis",
    ),
    medium=(
        "gevaarlijk",
        "bang",
        "onveilig",
        "durft niet",
    ),
)


def _referral_for(crisis_type: CrisisType, severity: CrisisSeverity) -> Referral:
    if crisis_type is CrisisType.SUICIDALITY:
        return Referral.SUICIDE_PREVENTION
    if severity is CrisisSeverity.CRITICAL:
        return Referral.EMERGENCY
    if crisis_type is CrisisType.SELF_HARM:
        return Referral.HUISARTS
    return Referral.VEILIG_THUIS


# Category priority within a tier: the first category with a hit wins.
_CATEGORIES: tuple[tuple[CrisisType, KeywordTiers], ...] = (
    (CrisisType.SUICIDALITY, SUICIDALITY_KEYWORDS),
    (CrisisType.SELF_HARM, SELF_HARM_KEYWORDS),
    (CrisisType.ABUSE, ABUSE_KEYWORDS),
    (CrisisType.SEVERE_VIOLENCE, SEVERE_VIOLENCE_KEYWORDS),
)


def _first_match(message: str) -> tuple[CrisisType, CrisisSeverity, str] | None:
    # A critical keyword in any category outranks every milder keyword.
    for severity, tier in (
        (CrisisSeverity.CRITICAL, "critical"),
        (CrisisSeverity.HIGH, "high"),
        (CrisisSeverity.MEDIUM, "medium"),
    ):
        for crisis_type, tiers in _CATEGORIES:
            for keyword in getattr(tiers, tier):
                if keyword in message:
                    return crisis_type, severity, keyword
    return None


def detect_crisis(message: str) -> CrisisDetectionResult:
    """Detect crisis signals in a single user message."""
    match = _first_match(message.lower())
    if match is None:
        return CrisisDetectionResult()

    crisis_type, severity, keyword = match
    return CrisisDetectionResult(
        detected=True,
        type=crisis_type,
        severity=severity,
        matched_keywords=[keyword],
        requires_immediate_action=severity in (CrisisSeverity.CRITICAL, CrisisSeverity.HIGH),
        recommended_referral=_referral_for(crisis_type, severity),
    )


SUICIDE_PREVENTION_GUIDANCE = """
**CRISIS PROTOCOL - SUÏCIDALITEIT GEDETECTEERD**

De gebruiker heeft suïcidale gedachten geuit. Je MOET direct de volgende hulp aanbieden:

1. **Erken hun gevoelens:** "Ik hoor dat je het heel moeilijk hebt. Het is dapper dat je dit deelt."

2. **Bied directe hulp:** "Er zijn mensen die je nu direct kunnen helpen. Wil je met iemand praten?"

3. **Geef 113 Zelfmoordpreventie:**
   - Telefoonnummer: **113** (gratis, 24/7)
   - Chat: **www.113.nl/chat** (anoniem)
   - "Je kunt 113 bellen of chatten, dag en nacht. Ze luisteren zonder te oordelen."

4. **Bij acute crisis:** "Als je nu in gevaar bent, bel dan 112 of vraag iemand om je heen om hulp."

5. **Blijf verbonden:** "Ik blijf hier voor je. Wil je me vertellen wat er speelt?"

**NOOIT zeggen:** "Het komt wel goed", "Anderen hebben het erger", "Denk aan je familie"
"""

EMERGENCY_GUIDANCE = """
**CRISIS PROTOCOL - ACUTE GEVAAR GEDETECTEERD**

De gebruiker is in acuut gevaar. Je MOET direct de volgende hulp aanbieden:

1. **Erken de ernst:** "Ik hoor dat je in een gevaarlijke situatie zit. Je veiligheid is het allerbelangrijkste."

2. **Bied directe hulp:** "Als je nu in gevaar bent, bel dan direct **112** (politie/ambulance)."

3. **Veilige plek:** "Kun je nu naar een veilige plek gaan? Naar een vriend, buurvrouw, of openbare plek?"

4. **Veilig Thuis:** "Je kunt ook Veilig Thuis bellen: **0800-2000** (gratis, 24/7) voor hulp bij geweld thuis."

5. **Blijf verbonden:** "Ik blijf hier voor je. Vertel me wat je nodig hebt."
"""

VEILIG_THUIS_GUIDANCE = """
**CRISIS PROTOCOL - MISBRUIK/GEWELD GEDETECTEERD**

De gebruiker meldt mogelijk misbruik of geweld. Je MOET direct de volgende hulp aanbieden:

1. **Erken hun moed:** "Het is heel dapper dat je dit vertelt. Niemand verdient dit."

2. **Bied hulp:** "Er zijn mensen die je kunnen helpen om dit te stoppen."

3. **Geef Veilig Thuis:**
   - Telefoonnummer: **0800-2000** (gratis, 24/7)
   - "Veilig Thuis helpt bij geweld, misbruik en verwaarlozing. Je mag anoniem bellen."

4. **Bij acute gevaar:** "Als je nu in gevaar bent, bel dan 112."

5. **Vertrouwenspersoon:** "Kun je dit ook vertellen aan een volwassene die je vertrouwt? Een leraar, mentor, of familielid?"

6. **Blijf verbonden:** "Ik blijf hier voor je. Wat heb je nu het meeste nodig?"
"""

HUISARTS_GUIDANCE = """
**CRISIS PROTOCOL - ZELFBESCHADIGING GEDETECTEERD**

De gebruiker meldt zelfbeschadiging. Je MOET direct de volgende hulp aanbieden:

1. **Erken hun pijn:** "Ik hoor dat je jezelf pijn doet. Dat moet heel moeilijk zijn."

2. **Bied hulp:** "Er zijn betere manieren om met deze gevoelens om te gaan. Wil je hulp?"

3. **Geef huisarts/jeugdarts:**
   - "Kun je naar je huisarts of jeugdarts gaan? Zij kunnen je helpen."
   - "Je kunt ook bellen naar je huisartsenpraktijk voor een afspraak."

4. **Bij ernstige verwonding:** "Als je nu gewond bent, bel dan 112 of ga naar de Spoedeisende Hulp."

5. **Alternatieve coping:** "Wat helpt jou om even tot rust te komen? Muziek, wandelen, iemand bellen?"

6. **Blijf verbonden:** "Ik blijf hier voor je. Vertel me wat je voelt."
"""

_GUIDANCE: dict[Referral, str] = {
    Referral.SUICIDE_PREVENTION: SUICIDE_PREVENTION_GUIDANCE,
    Referral.EMERGENCY: EMERGENCY_GUIDANCE,
    Referral.VEILIG_THUIS: VEILIG_THUIS_GUIDANCE,
    Referral.HUISARTS: HUISARTS_GUIDANCE,
}


def crisis_response_guidance(result: CrisisDetectionResult) -> str:
    """Protocol text to inject into the system prompt, empty unless immediate action is required."""
    if not result.detected or not result.requires_immediate_action:
        return ""
    return _GUIDANCE.get(result.recommended_referral, "")

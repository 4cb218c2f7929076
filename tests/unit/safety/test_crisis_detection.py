import pytest

from matti.safety.crisis_detection import (
    ABUSE_KEYWORDS,
    SELF_HARM_KEYWORDS,
    SEVERE_VIOLENCE_KEYWORDS,
    SUICIDALITY_KEYWORDS,
    CrisisSeverity,
    CrisisType,
    Referral,
    crisis_response_guidance,
    detect_crisis,
)


@pytest.mark.parametrize(
    "message, crisis_type, severity, referral",
    [
        ("Ik wil dood", CrisisType.SUICIDALITY, CrisisSeverity.CRITICAL, Referral.SUICIDE_PREVENTION),
        ("Ik heb mezelf gesneden", CrisisType.SELF_HARM, CrisisSeverity.CRITICAL, Referral.EMERGENCY),
        ("Mijn vader slaat me", CrisisType.ABUSE, CrisisSeverity.CRITICAL, Referral.EMERGENCY),
        ("Ik ben bang voor mijn vader", CrisisType.ABUSE, CrisisSeverity.MEDIUM, Referral.VEILIG_THUIS),
        ("Ik voel me onveilig", CrisisType.SEVERE_VIOLENCE, CrisisSeverity.MEDIUM, Referral.VEILIG_THUIS),
    ],
)
def test_detect_crisis_classifies_message(message, crisis_type, severity, referral):
    result = detect_crisis(message)

    assert result.detected is True
    assert result.type is crisis_type
    assert result.severity is severity
    assert result.recommended_referral is referral


def test_high_self_harm_refers_to_huisarts():
    result = detect_crisis("Ik heb een scheermesje gepakt")

    assert result.type is CrisisType.SELF_HARM
    assert result.severity is CrisisSeverity.HIGH
    assert result.matched_keywords == ["scheermesje"]
    assert result.requires_immediate_action is True
    assert result.recommended_referral is Referral.HUISARTS


def test_medium_severity_does_not_require_immediate_action():
    result = detect_crisis("Ik ben bang voor mijn vader")

    assert result.requires_immediate_action is False
    assert crisis_response_guidance(result) == ""


def test_harmless_message_is_not_detected():
    result = detect_crisis("Ik heb zin in het weekend")

    assert result.detected is False
    assert result.type is CrisisType.NONE
    assert result.recommended_referral is Referral.NONE
    assert crisis_response_guidance(result) == ""


@pytest.mark.parametrize(
    "keyword",
    [*SUICIDALITY_KEYWORDS.critical, *SELF_HARM_KEYWORDS.critical, *ABUSE_KEYWORDS.critical, *SEVERE_VIOLENCE_KEYWORDS.critical],
)
def test_critical_keywords_always_require_immediate_action(keyword):
    result = detect_crisis(f"Eigenlijk {keyword}, echt waar")

    assert result.detected is True
    assert result.severity is CrisisSeverity.CRITICAL
    assert result.requires_immediate_action is True


def test_critical_keyword_outranks_milder_keyword_of_higher_priority_category():
    result = detect_crisis("Ik wil soms verdwijnen, mijn vader slaat me")

    assert result.type is CrisisType.ABUSE
    assert result.severity is CrisisSeverity.CRITICAL
    assert result.requires_immediate_action is True


def test_detection_is_case_insensitive():
    assert detect_crisis("IK WIL DOOD").type is CrisisType.SUICIDALITY


def test_suicidality_guidance_mentions_113():
    guidance = crisis_response_guidance(detect_crisis("Ik wil dood"))

    assert "113" in guidance


def test_emergency_guidance_mentions_112_and_veilig_thuis():
    guidance = crisis_response_guidance(detect_crisis("Mijn vader slaat me"))

    assert "112" in guidance
    assert "0800-2000" in guidance

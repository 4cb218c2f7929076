import pytest

from matti.safety.bullying_detection import (
    BullyingSeverity,
    bullying_severity,
    detect_bullying,
    mentions_bullying,
    recommended_bullying_action,
)


def test_structural_bullying_with_impact_is_critical():
    result = detect_bullying("Ze pesten mij elke dag op school en ik voel me alleen")

    assert result.is_bullying is True
    assert result.is_structural is True
    assert result.severity is BullyingSeverity.CRITICAL
    assert result.confidence == 1.0
    assert "pesten" in result.indicators.behavior
    assert result.reasoning.startswith("Pesten gedetecteerd")


def test_victim_signal_and_emotion_without_repetition_is_high():
    result = detect_bullying("Ze lachen me uit en ik ben verdrietig")

    assert result.is_bullying is True
    assert result.is_structural is False
    assert result.severity is BullyingSeverity.HIGH


def test_repeated_behaviour_is_structural():
    result = detect_bullying("Ik word steeds buitengesloten")

    assert result.is_structural is True
    assert result.severity is BullyingSeverity.HIGH
    assert result.confidence == 0.6


def test_emotion_only_impact_is_medium():
    result = detect_bullying("Ze negeren mij en ik ben onzeker")

    assert result.severity is BullyingSeverity.MEDIUM


def test_single_incident_is_not_bullying():
    result = detect_bullying("Ze gingen me uitlachen")

    assert result.is_bullying is False
    assert result.severity is BullyingSeverity.NONE
    assert result.confidence == 0.6
    assert "Enkel incident" in result.reasoning


def test_unrelated_message_has_no_indicators():
    result = detect_bullying("Ik vond de toets lastig")

    assert result.is_bullying is False
    assert result.confidence == 0.0
    assert result.reasoning == "Geen pesten-indicatoren gedetecteerd."


@pytest.mark.parametrize("severity", list(BullyingSeverity))
def test_every_severity_has_a_recommendation(severity):
    assert recommended_bullying_action(severity)


def test_critical_recommendation_mentions_kindertelefoon():
    assert "0800-0432" in recommended_bullying_action(BullyingSeverity.CRITICAL)


def test_mentions_bullying_only_reads_user_turns():
    assert mentions_bullying([{"role": "user", "content": "Ik word gepest"}]) is True
    assert mentions_bullying([{"role": "assistant", "content": "Word je gepest?"}]) is False
    assert mentions_bullying([]) is False


def test_mentions_bullying_matches_word_starts():
    assert mentions_bullying([{"role": "user", "content": "De pesters zaten weer achter me"}]) is True
    assert mentions_bullying([{"role": "user", "content": "Ik heb een nieuwe hobby"}]) is False


@pytest.mark.parametrize(
    "content, expected",
    [
        ("Ze bedreigen me na school", "high"),
        ("Het is cyberpesten in de klas", "medium"),
        ("Ik word gepest", "low"),
    ],
)
def test_bullying_severity(content, expected):
    assert bullying_severity([{"role": "user", "content": content}]) == expected

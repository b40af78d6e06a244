"""
Text heuristics for RxNav interaction descriptions.

RxNav rarely supplies a usable severity field, so severity and the combined
symptom are derived from the free-text description. Rules are checked in
order and the first match wins; the order must not change.
"""

from typing import Iterable, List, Tuple

from rxcheck.schemas.analysis_schema import RiskLevel

SEVERITY_RULES: List[Tuple[Tuple[str, ...], RiskLevel]] = [
    (("contraindicated", "severe", "life-threatening"), RiskLevel.SEVERE),
    (("monitor", "caution", "risk"), RiskLevel.HIGH),
    (("moderate",), RiskLevel.MODERATE),
]

SYMPTOM_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("bleeding",), "Increased Bleeding Risk"),
    (("drowsiness", "sedation"), "Excessive Drowsiness"),
    (("arrhythmia", "qt prolongation"), "Heart Rhythm Irregularities"),
    (("hypotension", "blood pressure"), "Blood Pressure Changes"),
    (("toxicity",), "Drug Toxicity"),
]

DEFAULT_SYMPTOM = "Interaction Effect"

# Unknown is deliberately absent: it has no place in the ordering
RISK_ORDER = {
    RiskLevel.LOW: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.SEVERE: 3,
}


def classify_severity(description: str) -> RiskLevel:
    text = (description or "").lower()
    for keywords, level in SEVERITY_RULES:
        if any(k in text for k in keywords):
            return level
    return RiskLevel.LOW


def extract_symptom(description: str) -> str:
    text = (description or "").lower()
    for keywords, symptom in SYMPTOM_RULES:
        if any(k in text for k in keywords):
            return symptom
    return DEFAULT_SYMPTOM


def escalate(current: RiskLevel, severity: RiskLevel) -> RiskLevel:
    """
    Guarded escalation of the running maximum by one pair's severity.

    Severe always wins, High wins unless Severe is already held, Moderate
    only lifts a Low. Anything else (including Unknown) leaves it unchanged.
    """
    if (
        severity == RiskLevel.SEVERE
        or (severity == RiskLevel.HIGH and current != RiskLevel.SEVERE)
        or (severity == RiskLevel.MODERATE and current == RiskLevel.LOW)
    ):
        return severity
    return current


def aggregate_risk(severities: Iterable[RiskLevel]) -> RiskLevel:
    """Fold escalate() over the pair severities, starting at Low."""
    current = RiskLevel.LOW
    for severity in severities:
        current = escalate(current, severity)
    return current

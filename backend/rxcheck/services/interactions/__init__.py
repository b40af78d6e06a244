"""
Interaction analysis backed by the NLM interaction database, plus the
text heuristics used to grade its free-text pair descriptions.
"""

from .severity import (
    RISK_ORDER,
    aggregate_risk,
    classify_severity,
    escalate,
    extract_symptom,
)
from .database_analyzer import DatabaseAnalyzer, parse_interaction_pairs

__all__ = [
    'RISK_ORDER',
    'aggregate_risk',
    'classify_severity',
    'escalate',
    'extract_symptom',
    'DatabaseAnalyzer',
    'parse_interaction_pairs',
]

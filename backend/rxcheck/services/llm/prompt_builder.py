from typing import Sequence

from rxcheck.schemas.analysis_schema import DrugEntry, RiskLevel

SYSTEM_INSTRUCTION = (
    "You are a helpful and accurate medical assistant. You strictly provide medical "
    "facts about drug interactions. You always include a disclaimer that this is not "
    "a substitute for professional medical advice."
)

RISK_ENUM = [level.value for level in RiskLevel]

_STRING = {"type": "STRING"}

# Mirrors AnalysisResult; keys are the camelCase names the parser expects
ANALYSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "riskLevel": {
            "type": "STRING",
            "enum": RISK_ENUM,
            "description": "The highest severity level of interaction found.",
        },
        "summary": {
            "type": "STRING",
            "description": "A concise summary of the analysis for the patient.",
        },
        "individualAnalyses": {
            "type": "ARRAY",
            "description": "Analysis for each single drug.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "drugName": _STRING,
                    "usageSummary": {"type": "STRING", "description": "Briefly what it treats."},
                    "commonSideEffects": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "symptom": _STRING,
                                "frequency": _STRING,
                                "severity": _STRING,
                            },
                        },
                    },
                },
            },
        },
        "interactions": {
            "type": "ARRAY",
            "description": "Specific interaction mechanisms between drugs.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "drugsInvolved": {"type": "ARRAY", "items": _STRING},
                    "mechanism": {
                        "type": "STRING",
                        "description": "Pharmacokinetic or pharmacodynamic mechanism.",
                    },
                    "severity": {"type": "STRING", "enum": RISK_ENUM},
                    "description": {
                        "type": "STRING",
                        "description": "Detailed explanation of the interaction.",
                    },
                },
            },
        },
        "combinedSideEffects": {
            "type": "ARRAY",
            "description": "Side effects that are unique to or worsened by the combination, with remedies.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "symptom": _STRING,
                    "description": {
                        "type": "STRING",
                        "description": "Why this happens with this combination.",
                    },
                    "managementTips": {
                        "type": "ARRAY",
                        "items": _STRING,
                        "description": "Practical advice or remedies to manage this side effect.",
                    },
                },
            },
        },
        "disclaimer": {"type": "STRING", "description": "Standard medical disclaimer."},
    },
    "required": [
        "riskLevel",
        "summary",
        "individualAnalyses",
        "interactions",
        "combinedSideEffects",
        "disclaimer",
    ],
}


def describe_drug(drug: DrugEntry) -> str:
    if drug.generic_name:
        return f"{drug.name} (Generic: {drug.generic_name})"
    return drug.name


def build_analysis_prompt(drugs: Sequence[DrugEntry]) -> str:
    """
    Constructs the analysis prompt for the generative back end.

    Args:
        drugs: Selected drugs, in display order.

    Returns:
        A prompt enumerating every drug and the five analysis tasks.
    """
    drug_descriptions = ", ".join(describe_drug(d) for d in drugs)
    return (
        "Analyze the following list of drugs for potential interactions, side effects, "
        "and management strategies.\n"
        f"Drugs: {drug_descriptions}.\n\n"
        "Act as a senior clinical pharmacologist.\n"
        "1. Identify individual side effects for each drug.\n"
        "2. Identify specific interactions between any pairs or groups of drugs.\n"
        "3. Determine the overall risk level.\n"
        "4. Predict combined side effects that might be exacerbated by taking these together.\n"
        "5. Provide actionable management tips or remedies for these side effects.\n\n"
        "Ensure the data is accurate based on established medical knowledge bases."
    )

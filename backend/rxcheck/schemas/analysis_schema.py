"""
Report contract shared by both analyzers.

Field names serialize in camelCase (the documented JSON shape); Python code
uses the snake_case attribute names. All report models are immutable, down
to their sequence fields.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Low < Moderate < High < Severe; Unknown sits outside the ordering."""
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    SEVERE = "Severe"
    UNKNOWN = "Unknown"


class ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DrugEntry(ReportModel):
    id: str = Field(..., description="Opaque id, unique within a session")
    name: str = Field(..., min_length=1, description="Display name")
    rxcui: Optional[str] = Field(None, description="RxNorm concept id, when resolved")
    generic_name: Optional[str] = Field(None, alias="genericName")

    def is_same_drug(self, other: "DrugEntry") -> bool:
        """Same id, or same name ignoring case."""
        return self.id == other.id or self.name.lower() == other.name.lower()


class SideEffect(ReportModel):
    symptom: str
    frequency: str = Field(..., description="e.g. Common, Rare")
    severity: str = Field(..., description="e.g. Mild, Severe")


class IndividualDrugAnalysis(ReportModel):
    drug_name: str = Field(..., alias="drugName")
    usage_summary: str = Field(..., alias="usageSummary")
    common_side_effects: Tuple[SideEffect, ...] = Field((), alias="commonSideEffects")


class InteractionDetail(ReportModel):
    drugs_involved: Tuple[str, ...] = Field(..., alias="drugsInvolved")
    mechanism: str
    severity: RiskLevel
    description: str


class CombinedEffect(ReportModel):
    symptom: str
    description: str
    management_tips: Tuple[str, ...] = Field((), alias="managementTips")


class AnalysisResult(ReportModel):
    risk_level: RiskLevel = Field(..., alias="riskLevel")
    summary: str
    individual_analyses: Tuple[IndividualDrugAnalysis, ...] = Field(..., alias="individualAnalyses")
    interactions: Tuple[InteractionDetail, ...]
    combined_side_effects: Tuple[CombinedEffect, ...] = Field(..., alias="combinedSideEffects")
    disclaimer: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

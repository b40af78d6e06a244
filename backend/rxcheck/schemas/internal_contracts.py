from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class MinConceptItem(BaseModel):
    rxcui: Optional[str] = None
    name: str


class InteractionConcept(BaseModel):
    min_concept_item: MinConceptItem = Field(..., alias="minConceptItem")


class InteractionPair(BaseModel):
    """
    One drug pair from the RxNav interaction list, before classification.
    RxNav always reports exactly two concepts per pair.
    """
    description: str
    interaction_concept: List[InteractionConcept] = Field(
        ..., alias="interactionConcept", min_length=2, max_length=2
    )
    severity: Optional[str] = Field(None, description="Upstream severity; usually N/A")

    @property
    def drug_names(self) -> List[str]:
        return [c.min_concept_item.name for c in self.interaction_concept]


class FullInteractionType(BaseModel):
    interaction_pair: List[InteractionPair] = Field(default_factory=list, alias="interactionPair")

    @field_validator("interaction_pair", mode="before")
    @classmethod
    def null_pairs_as_empty(cls, value):
        return [] if value is None else value


class FullInteractionTypeGroup(BaseModel):
    source_name: Optional[str] = Field(None, alias="sourceName")
    full_interaction_type: List[FullInteractionType] = Field(
        default_factory=list, alias="fullInteractionType"
    )

    @field_validator("full_interaction_type", mode="before")
    @classmethod
    def null_types_as_empty(cls, value):
        return [] if value is None else value


class InteractionListResponse(BaseModel):
    """
    Envelope of GET /interaction/list.json. A missing or null group list
    means no interactions.
    """
    full_interaction_type_group: List[FullInteractionTypeGroup] = Field(
        default_factory=list, alias="fullInteractionTypeGroup"
    )

    # RxNav sends null where it means "nothing here"
    @field_validator("full_interaction_type_group", mode="before")
    @classmethod
    def null_groups_as_empty(cls, value):
        return [] if value is None else value

    def pairs(self) -> List[InteractionPair]:
        return [
            pair
            for group in self.full_interaction_type_group
            for interaction_type in group.full_interaction_type
            for pair in interaction_type.interaction_pair
        ]

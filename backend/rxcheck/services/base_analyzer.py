from abc import ABC, abstractmethod
from typing import Sequence

from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry


class InteractionAnalyzer(ABC):
    """
    Capability shared by the generative and the database back ends.

    Implementations raise the errors in rxcheck.core.errors and never
    recover locally; the session decides how a failure is presented.
    """

    name: str = "analyzer"

    # True when entries must carry an rxcui to be analyzed
    requires_identifiers: bool = False

    @abstractmethod
    async def analyze(self, drugs: Sequence[DrugEntry]) -> AnalysisResult:
        ...

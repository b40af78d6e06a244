from typing import List, Optional, Tuple

from rxcheck.schemas.analysis_schema import AnalysisResult, DrugEntry


class SelectionState:
    """
    The drugs chosen in the active session, in insertion order, plus the
    analysis result and error derived from them.

    No two entries are ever the same drug (same id, or same name ignoring
    case). Any change to the list discards the held result.
    """

    def __init__(self):
        self._entries: List[DrugEntry] = []
        # bumped on every change to the list
        self.version = 0
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None

    @property
    def entries(self) -> Tuple[DrugEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def contains_name(self, name: str) -> bool:
        lowered = name.lower()
        return any(e.name.lower() == lowered for e in self._entries)

    def add(self, entry: DrugEntry) -> bool:
        """Append unless it duplicates an existing entry. Returns whether it was added."""
        if any(existing.is_same_drug(entry) for existing in self._entries):
            return False
        self._entries.append(entry)
        self.version += 1
        self.result = None
        return True

    def remove(self, drug_id: str) -> bool:
        """Drop the entry with this id, if any. The result is discarded either way."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != drug_id]
        self.result = None
        removed = len(self._entries) < before
        if removed:
            self.version += 1
        return removed

    def clear(self) -> None:
        self._entries = []
        self.version += 1
        self.result = None
        self.error = None

    def snapshot(self) -> List[DrugEntry]:
        return list(self._entries)

    def set_result(self, result: AnalysisResult) -> None:
        self.result = result
        self.error = None

    def set_error(self, message: str) -> None:
        self.result = None
        self.error = message

    def invalidate(self) -> None:
        self.result = None
        self.error = None

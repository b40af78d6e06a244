from .selection import SelectionState
from .search import SuggestionSearch
from .session import AnalysisSession, create_session

__all__ = [
    'SelectionState',
    'SuggestionSearch',
    'AnalysisSession',
    'create_session',
]

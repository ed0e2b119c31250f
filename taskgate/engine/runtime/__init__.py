from .models import OutcomeKind, TurnOutcome
from .runner import MAX_TURNS, TurnRunner

__all__ = [
    "MAX_TURNS",
    "OutcomeKind",
    "TurnOutcome",
    "TurnRunner",
]

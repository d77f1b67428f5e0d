"""Deterministic, headless rules engine for cyberduel.

IMPORTANT: This package must never import a UI or network layer.
"""

from .catalog import CardCatalog
from .errors import DeckExhausted, EngineError, IllegalMove, InvalidConfig, UnknownCardType
from .match import (
    MatchConfig,
    MatchResult,
    MatchState,
    RoundRecord,
    StepResult,
    current_phase,
    history,
    legal_choices,
    new_match,
    replay,
    result,
    submit_choice,
    view,
)
from .resolver import Outcome, mirror, resolve
from .types import MAX_DISTANCE, MIN_DISTANCE, MoveCard, MoveEffect

__all__ = [
    "CardCatalog",
    "DeckExhausted",
    "EngineError",
    "IllegalMove",
    "InvalidConfig",
    "MAX_DISTANCE",
    "MIN_DISTANCE",
    "MatchConfig",
    "MatchResult",
    "MatchState",
    "MoveCard",
    "MoveEffect",
    "Outcome",
    "RoundRecord",
    "StepResult",
    "UnknownCardType",
    "current_phase",
    "history",
    "legal_choices",
    "mirror",
    "new_match",
    "replay",
    "resolve",
    "result",
    "submit_choice",
    "view",
]

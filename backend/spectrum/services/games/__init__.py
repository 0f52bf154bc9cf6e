"""Game domain services: prompts, consensus scoring and the game registry.

This package contains the in-memory game engine that should be used by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .errors import (
    GameError, GameNotFound, NameTaken, GameFull, CannotStart,
    NotAcceptingSubmissions, InvalidRound, GameNotInProgress, CannotAdvance, AlreadyInGame,
)
from .prompts import PromptCatalog, PromptStore, select_for_game
from .registry import GameRegistry, SubmissionStatus, RoundResults, RoundAdvance, DisconnectResult
from .scoring import compute_consensus, score_ranking, ConsensusResult

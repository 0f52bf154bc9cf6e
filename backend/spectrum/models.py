from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set
import time

# Game.status values
STATUS_WAITING = 'waiting'
STATUS_PLAYING = 'playing'
STATUS_FINISHED = 'finished'

# Game.round_phase values (only meaningful while playing)
PHASE_RANKING = 'ranking'
PHASE_RESULTS = 'results'


@dataclass
class Player:
    id: str
    name: str
    joined_at: float = field(default_factory=time.time)
    is_host: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'joined_at': self.joined_at,
            'is_host': self.is_host,
        }


@dataclass(frozen=True)
class Prompt:
    id: str
    category: str
    text: str
    description: str = ''

    def to_dict(self):
        return {
            'id': self.id,
            'category': self.category,
            'text': self.text,
            'description': self.description,
        }


@dataclass
class Round:
    round_number: int
    prompt: Prompt
    rankings: Dict[str, List[str]] = field(default_factory=dict)  # player_id -> ordered names
    submitted: Set[str] = field(default_factory=set)
    consensus_ranking: Optional[List[str]] = None
    round_scores: Optional[Dict[str, int]] = None

    @property
    def prompt_id(self) -> str:
        return self.prompt.id

    @property
    def has_results(self) -> bool:
        return self.consensus_ranking is not None

    def to_dict(self, include_rankings=False):
        data = {
            'round_number': self.round_number,
            'prompt': self.prompt.text,
            'prompt_id': self.prompt_id,
            'category': self.prompt.category,
            'description': self.prompt.description,
            'submitted': sorted(self.submitted),
            'consensus_ranking': list(self.consensus_ranking) if self.has_results else None,
            'round_scores': dict(self.round_scores) if self.round_scores is not None else None,
        }
        # Individual rankings stay private until the round is scored
        if include_rankings or self.has_results:
            data['rankings'] = {pid: list(r) for pid, r in self.rankings.items()}
        return data


@dataclass
class Game:
    code: str
    host_id: str
    players: List[Player] = field(default_factory=list)
    status: str = STATUS_WAITING
    created_at: float = field(default_factory=time.time)
    current_round: int = 0
    total_rounds: int = 0
    round_phase: Optional[str] = None
    rounds: List[Round] = field(default_factory=list)
    scores: Dict[str, int] = field(default_factory=dict)
    prompts: List[Prompt] = field(default_factory=list)  # selected at start, one per round

    def get_player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_player_named(self, name: str) -> bool:
        folded = name.casefold()
        return any(p.name.casefold() == folded for p in self.players)

    @property
    def player_names(self) -> List[str]:
        return [p.name for p in self.players]

    @property
    def current_round_state(self) -> Optional[Round]:
        if 1 <= self.current_round <= len(self.rounds):
            return self.rounds[self.current_round - 1]
        return None

    def to_dict(self, include_rounds=False):
        current = self.current_round_state
        data = {
            'code': self.code,
            'host_id': self.host_id,
            'status': self.status,
            'created_at': self.created_at,
            'players': [p.to_dict() for p in self.players],
            'current_round': self.current_round,
            'total_rounds': self.total_rounds,
            'round_phase': self.round_phase,
            'scores': dict(self.scores),
            'round': current.to_dict() if current else None,
        }
        if include_rounds:
            data['rounds'] = [r.to_dict() for r in self.rounds]
        return data

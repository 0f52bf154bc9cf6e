import logging
import random
import string
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from spectrum.models import (
    Game, Player, Prompt, Round,
    STATUS_WAITING, STATUS_PLAYING, STATUS_FINISHED,
    PHASE_RANKING, PHASE_RESULTS,
)
from .errors import (
    GameNotFound, NameTaken, GameFull, CannotStart, NotAcceptingSubmissions,
    InvalidRound, GameNotInProgress, CannotAdvance, AlreadyInGame,
)
from .prompts import PromptCatalog, select_for_game
from .scoring import compute_consensus

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6
MAX_PLAYERS = 8


@dataclass
class SubmissionStatus:
    all_submitted: bool
    submitted_count: int
    total_players: int

    def to_dict(self):
        return {
            'all_submitted': self.all_submitted,
            'submitted_count': self.submitted_count,
            'total_players': self.total_players,
        }


@dataclass
class RoundResults:
    consensus_ranking: List[str]
    round_scores: Dict[str, int]
    total_scores: Dict[str, int]
    # Serialized round as it stood when it was scored
    round: Dict = field(default_factory=dict)

    def to_dict(self):
        return {
            'consensus_ranking': list(self.consensus_ranking),
            'round_scores': dict(self.round_scores),
            'total_scores': dict(self.total_scores),
            'round': dict(self.round),
        }


@dataclass
class RoundAdvance:
    game_finished: bool
    final_scores: Optional[Dict[str, int]] = None
    new_round: Optional[int] = None
    prompt: Optional[Prompt] = None

    def to_dict(self):
        if self.game_finished:
            return {'game_finished': True, 'final_scores': dict(self.final_scores or {})}
        return {
            'game_finished': False,
            'new_round': self.new_round,
            'prompt': self.prompt.to_dict() if self.prompt else None,
        }


@dataclass
class DisconnectResult:
    game_code: Optional[str]
    game_deleted: bool = False
    players: List[Player] = field(default_factory=list)


class GameRegistry:
    """Owns every live game and drives its round/phase state machine.

    Operations on one game are serialized by that game's lock; the code
    table and the player -> game index share a separate registry lock.
    A game lock may be held while taking the registry lock, never the
    other way round.
    """

    def __init__(self, prompt_source: Callable[[], PromptCatalog], total_rounds: int = 5,
                 min_players: int = 2, rng: Optional[random.Random] = None):
        self._prompt_source = prompt_source
        self.total_rounds = total_rounds
        self.min_players = min_players
        self._rng = rng or random.Random()
        self._games: Dict[str, Game] = {}
        self._player_to_game: Dict[str, str] = {}
        self._game_locks: Dict[str, threading.RLock] = {}
        self._lock = threading.Lock()

    # ---- indices ----

    def _generate_code(self) -> str:
        # Caller holds self._lock
        while True:
            code = ''.join(self._rng.choices(CODE_ALPHABET, k=CODE_LENGTH))
            if code not in self._games:
                return code

    def _remove_game(self, game: Game) -> None:
        # Caller holds the game lock
        with self._lock:
            self._games.pop(game.code, None)
            self._game_locks.pop(game.code, None)
            for p in game.players:
                if self._player_to_game.get(p.id) == game.code:
                    del self._player_to_game[p.id]

    @contextmanager
    def _locked_game(self, code: str) -> Iterator[Game]:
        code = (code or '').upper()
        with self._lock:
            lock = self._game_locks.get(code)
        if lock is None:
            raise GameNotFound()
        with lock:
            # The game may have been removed while we waited for its lock
            game = self._games.get(code)
            if game is None:
                raise GameNotFound()
            yield game

    # ---- lifecycle ----

    def create_game(self, host_id: str, host_name: str) -> Game:
        host = Player(id=host_id, name=host_name, is_host=True)
        with self._lock:
            if host_id in self._player_to_game:
                raise AlreadyInGame()
            code = self._generate_code()
            game = Game(code=code, host_id=host_id, players=[host])
            self._games[code] = game
            self._game_locks[code] = threading.RLock()
            self._player_to_game[host_id] = code
        logger.info(f"[game-create] code={code} host={host_id} name={host_name}")
        return game

    def join_game(self, code: str, player_id: str, player_name: str) -> Game:
        with self._locked_game(code) as game:
            if game.has_player_named(player_name):
                raise NameTaken()
            if len(game.players) >= MAX_PLAYERS:
                raise GameFull()
            # A connection id belongs to at most one roster
            with self._lock:
                if player_id in self._player_to_game:
                    raise AlreadyInGame()
                self._player_to_game[player_id] = game.code
            game.players.append(Player(id=player_id, name=player_name))
            logger.info(f"[game-join] code={game.code} player={player_id} name={player_name} players={len(game.players)}")
            return game

    def start_game(self, code: str) -> Game:
        with self._locked_game(code) as game:
            if game.status != STATUS_WAITING or len(game.players) < self.min_players:
                raise CannotStart(f'At least {self.min_players} players are required to start a waiting game')
            game.prompts = select_for_game(self._prompt_source(), self.total_rounds, rng=self._rng)
            game.status = STATUS_PLAYING
            game.total_rounds = self.total_rounds
            game.current_round = 1
            game.round_phase = PHASE_RANKING
            game.rounds = [Round(round_number=1, prompt=self._prompt_for_round(game, 1))]
            game.scores = {p.id: 0 for p in game.players}
            logger.info(f"[game-start] code={game.code} players={len(game.players)} rounds={game.total_rounds}")
            return game

    def submit_ranking(self, code: str, player_id: str, ranking: Sequence[str]) -> SubmissionStatus:
        with self._locked_game(code) as game:
            if game.status != STATUS_PLAYING or game.round_phase != PHASE_RANKING:
                raise NotAcceptingSubmissions()
            rnd = game.current_round_state
            if rnd is None:
                raise InvalidRound()
            rnd.rankings[player_id] = list(ranking)
            rnd.submitted.add(player_id)
            return SubmissionStatus(
                all_submitted=len(rnd.submitted) == len(game.players),
                submitted_count=len(rnd.submitted),
                total_players=len(game.players),
            )

    def calculate_round_results(self, code: str) -> RoundResults:
        with self._locked_game(code) as game:
            if game.status != STATUS_PLAYING:
                raise GameNotInProgress()
            rnd = game.current_round_state
            if rnd is None or rnd.has_results:
                raise InvalidRound('Results for this round were already calculated')
            result = compute_consensus(rnd.rankings, game.player_names)
            rnd.consensus_ranking = result.consensus_ranking
            rnd.round_scores = result.score_by_player
            for pid, points in result.score_by_player.items():
                game.scores[pid] = game.scores.get(pid, 0) + points
            game.round_phase = PHASE_RESULTS
            logger.info(f"[round-results] code={game.code} round={rnd.round_number} consensus={rnd.consensus_ranking}")
            return RoundResults(
                consensus_ranking=list(rnd.consensus_ranking),
                round_scores=dict(rnd.round_scores),
                total_scores=dict(game.scores),
                round=rnd.to_dict(),
            )

    def advance_to_next_round(self, code: str) -> RoundAdvance:
        with self._locked_game(code) as game:
            if game.status != STATUS_PLAYING or game.round_phase != PHASE_RESULTS:
                raise CannotAdvance()
            if game.current_round >= game.total_rounds:
                game.status = STATUS_FINISHED
                game.round_phase = None
                logger.info(f"[game-finish] code={game.code} rounds={game.current_round}")
                return RoundAdvance(game_finished=True, final_scores=dict(game.scores))
            game.current_round += 1
            game.round_phase = PHASE_RANKING
            prompt = self._prompt_for_round(game, game.current_round)
            game.rounds.append(Round(round_number=game.current_round, prompt=prompt))
            logger.info(f"[next-round] code={game.code} round={game.current_round} prompt={prompt.id}")
            return RoundAdvance(game_finished=False, new_round=game.current_round, prompt=prompt)

    def handle_disconnect(self, player_id: str) -> DisconnectResult:
        with self._lock:
            code = self._player_to_game.get(player_id)
        if code is None:
            return DisconnectResult(game_code=None)
        try:
            with self._locked_game(code) as game:
                if game.host_id == player_id:
                    self._remove_game(game)
                    logger.info(f"[game-delete] code={code} reason=host-left")
                    return DisconnectResult(game_code=code, game_deleted=True)
                game.players = [p for p in game.players if p.id != player_id]
                with self._lock:
                    self._player_to_game.pop(player_id, None)
                if not game.players:
                    self._remove_game(game)
                    logger.info(f"[game-delete] code={code} reason=empty")
                    return DisconnectResult(game_code=code, game_deleted=True)
                logger.info(f"[game-leave] code={code} player={player_id} players={len(game.players)}")
                return DisconnectResult(game_code=code, players=list(game.players))
        except GameNotFound:
            return DisconnectResult(game_code=None)

    # ---- accessors ----

    def get_game(self, code: str) -> Optional[Game]:
        with self._lock:
            return self._games.get((code or '').upper())

    def get_all_games(self) -> List[Game]:
        with self._lock:
            return list(self._games.values())

    def get_game_for_player(self, player_id: str) -> Optional[Game]:
        with self._lock:
            code = self._player_to_game.get(player_id)
            return self._games.get(code) if code else None

    def _prompt_for_round(self, game: Game, round_number: int) -> Prompt:
        if round_number <= len(game.prompts):
            return game.prompts[round_number - 1]
        return Prompt(
            id=f'placeholder_{round_number}',
            category='general',
            text=f'Round {round_number} prompt',
            description='',
        )

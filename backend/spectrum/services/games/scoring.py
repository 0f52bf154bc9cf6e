from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

POINTS_PER_ROUND = 100


@dataclass
class ConsensusResult:
    consensus_ranking: List[str]
    score_by_player: Dict[str, int]


def _plurality_at(position: int, rankings: Sequence[Sequence[str]], placed: set) -> Optional[str]:
    """Most common not-yet-placed subject at ``position``.

    Ties go to the subject that reached the winning tally first while the
    rankings are scanned in order.
    """
    tally: Dict[str, int] = {}
    best, best_count = None, 0
    for ranking in rankings:
        if position >= len(ranking):
            continue
        subject = ranking[position]
        if subject in placed:
            continue
        tally[subject] = tally.get(subject, 0) + 1
        if tally[subject] > best_count:
            best, best_count = subject, tally[subject]
    return best


def score_ranking(ranking: Sequence[str], consensus: Sequence[str]) -> int:
    """Points for one ranking: an equal share of 100 per position matching the consensus.

    The share is floor-divided, so a perfect match over three subjects
    earns 99, not 100.
    """
    if not consensus:
        return 0
    per_position = POINTS_PER_ROUND // len(consensus)
    matches = sum(1 for a, b in zip(ranking, consensus) if a == b)
    return per_position * matches


def compute_consensus(rankings_by_player: Mapping[str, Sequence[str]],
                      player_names: Sequence[str]) -> ConsensusResult:
    """Derive the consensus ranking for a round and score every submission.

    Positions are filled left to right by plurality vote among the
    submitted rankings, skipping subjects already placed. Positions nobody
    voted a free subject into are filled afterwards with the remaining
    names in roster order, so the result always has one slot per name.
    """
    rankings = list(rankings_by_player.values())
    slots: List[Optional[str]] = []
    placed = set()
    for position in range(len(player_names)):
        winner = _plurality_at(position, rankings, placed)
        slots.append(winner)
        if winner is not None:
            placed.add(winner)

    # There are never fewer unplaced names than empty slots
    leftovers = iter([name for name in player_names if name not in placed])
    consensus = [subject if subject is not None else next(leftovers) for subject in slots]

    scores = {pid: score_ranking(ranking, consensus) for pid, ranking in rankings_by_player.items()}
    return ConsensusResult(consensus_ranking=consensus, score_by_player=scores)

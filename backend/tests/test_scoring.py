from spectrum.services.games import compute_consensus, score_ranking


def test_unanimous_rankings_give_full_marks_less_remainder():
    names = ['Ann', 'Ben', 'Cat']
    rankings = {
        'p1': ['Cat', 'Ann', 'Ben'],
        'p2': ['Cat', 'Ann', 'Ben'],
        'p3': ['Cat', 'Ann', 'Ben'],
    }
    result = compute_consensus(rankings, names)
    assert result.consensus_ranking == ['Cat', 'Ann', 'Ben']
    # floor(100 / 3) * 3 -- the remainder is dropped
    assert result.score_by_player == {'p1': 99, 'p2': 99, 'p3': 99}


def test_plurality_wins_each_position():
    names = ['Ann', 'Ben', 'Cat']
    rankings = {
        'p1': ['Ann', 'Ben', 'Cat'],
        'p2': ['Ann', 'Cat', 'Ben'],
        'p3': ['Ben', 'Cat', 'Ann'],
    }
    result = compute_consensus(rankings, names)
    # Position 0: Ann 2 votes; position 1: Cat 2 votes; Ben fills the rest
    assert result.consensus_ranking == ['Ann', 'Cat', 'Ben']
    assert result.score_by_player == {'p1': 33, 'p2': 99, 'p3': 33}


def test_two_player_tie_breaks_on_first_ranking():
    names = ['X', 'Y']
    rankings = {'x': ['Y', 'X'], 'y': ['X', 'Y']}
    result = compute_consensus(rankings, names)
    # One vote each at position 0: the first ranking scanned wins
    assert result.consensus_ranking == ['Y', 'X']
    assert result.score_by_player == {'x': 100, 'y': 0}

    reordered = compute_consensus({'y': ['X', 'Y'], 'x': ['Y', 'X']}, names)
    assert reordered.consensus_ranking == ['X', 'Y']
    assert reordered.score_by_player == {'y': 100, 'x': 0}


def test_tie_goes_to_first_subject_reaching_the_top_tally():
    names = ['A', 'B', 'C']
    rankings = {
        'p1': ['A', 'B', 'C'],
        'p2': ['B', 'A', 'C'],
        'p3': ['B', 'C', 'A'],
        'p4': ['A', 'C', 'B'],
    }
    result = compute_consensus(rankings, names)
    # A and B both end with 2 votes at position 0; B got there first
    assert result.consensus_ranking[0] == 'B'
    assert sorted(result.consensus_ranking) == ['A', 'B', 'C']


def test_placed_subjects_are_skipped_in_later_positions():
    names = ['A', 'B', 'C']
    rankings = {
        'p1': ['A', 'A', 'A'],
        'p2': ['A', 'A', 'B'],
    }
    result = compute_consensus(rankings, names)
    # Position 1 has only A votes, which is already placed; B wins position 2
    assert result.consensus_ranking == ['A', 'C', 'B']


def test_unfilled_positions_use_roster_order():
    names = ['Ann', 'Ben', 'Cat', 'Dan']
    rankings = {'p1': ['Dan']}
    result = compute_consensus(rankings, names)
    assert result.consensus_ranking == ['Dan', 'Ann', 'Ben', 'Cat']
    assert result.score_by_player == {'p1': 25}


def test_no_rankings_yields_roster_order():
    result = compute_consensus({}, ['Ann', 'Ben'])
    assert result.consensus_ranking == ['Ann', 'Ben']
    assert result.score_by_player == {}


def test_consensus_length_matches_roster_even_with_unknown_names():
    names = ['Ann', 'Ben']
    rankings = {'p1': ['Zed', 'Ann', 'Ben'], 'p2': ['Zed', 'Ben', 'Ann']}
    result = compute_consensus(rankings, names)
    assert len(result.consensus_ranking) == 2
    assert result.consensus_ranking[0] == 'Zed'


def test_consensus_is_deterministic():
    names = ['A', 'B', 'C', 'D']
    rankings = {
        'p1': ['D', 'C', 'B', 'A'],
        'p2': ['D', 'B', 'C', 'A'],
        'p3': ['C', 'D', 'B', 'A'],
    }
    first = compute_consensus(rankings, names)
    second = compute_consensus(dict(rankings), list(names))
    assert first == second


def test_score_ranking_compares_only_overlapping_positions():
    assert score_ranking(['A'], ['A', 'B', 'C', 'D']) == 25
    assert score_ranking(['A', 'B', 'C', 'D', 'E'], ['A', 'B']) == 100
    assert score_ranking([], ['A', 'B']) == 0
    assert score_ranking(['A'], []) == 0

from flask import Blueprint, jsonify, current_app
from spectrum.services.games import GameNotFound


games = Blueprint('games', __name__)


def _registry():
    return current_app.extensions['game_registry']


@games.errorhandler(GameNotFound)
def handle_game_not_found(exc):
    return jsonify(exc.to_dict()), exc.http_status


@games.route('/', methods=['GET'])
def list_games():
    """
    Returns a summary of every live game.
    """
    return jsonify([
        {
            'code': g.code,
            'status': g.status,
            'player_count': len(g.players),
            'current_round': g.current_round,
            'total_rounds': g.total_rounds,
        }
        for g in _registry().get_all_games()
    ])


@games.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    """
    Returns the full state of a game, including every round reached so far.
    """
    game = _registry().get_game(game_code)
    if game is None:
        raise GameNotFound()
    return jsonify(game.to_dict(include_rounds=True))

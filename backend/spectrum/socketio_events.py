from flask import current_app, request
from flask_socketio import join_room, emit
from spectrum import socketio
from spectrum.services.games import GameError, GameNotFound, InvalidRound

NAMESPACE = '/ws'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry():
    return current_app.extensions['game_registry']


def _fail(message: str, code: str = 'BadRequest'):
    return {'success': False, 'error': message, 'code': code}


def _hosted_game(sid: str):
    """The game ``sid`` belongs to, provided ``sid`` is its host."""
    game = _registry().get_game_for_player(sid)
    if game is None:
        raise GameNotFound()
    if game.host_id != sid:
        return None
    return game


def handle_connect(auth=None):
    current_app.logger.info(f"[socket] connect sid={_get_sid()}")
    emit('connected', {'player_id': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    result = _registry().handle_disconnect(sid)
    if not result.game_code:
        return
    if result.game_deleted:
        socketio.emit('game_deleted', {'game_code': result.game_code}, to=result.game_code, namespace=NAMESPACE)
    else:
        socketio.emit('player_left', {
            'player_id': sid,
            'players': [p.to_dict() for p in result.players],
        }, to=result.game_code, namespace=NAMESPACE)
    current_app.logger.info(f"[socket] player={sid} left game={result.game_code} deleted={result.game_deleted}")


def handle_create_game(data):
    host_name = ((data or {}).get('host_name') or '').strip()
    if not host_name:
        return _fail('host_name is required')
    try:
        game = _registry().create_game(_get_sid(), host_name)
    except GameError as exc:
        return exc.to_dict()
    join_room(game.code)
    return {'success': True, 'game': game.to_dict()}


def handle_join_game(data):
    game_code = ((data or {}).get('game_code') or '').strip().upper()
    player_name = ((data or {}).get('player_name') or '').strip()
    if not game_code or not player_name:
        return _fail('game_code and player_name are required')
    sid = _get_sid()
    try:
        game = _registry().join_game(game_code, sid, player_name)
    except GameError as exc:
        return exc.to_dict()
    join_room(game.code)
    emit('player_joined', {
        'player_id': sid,
        'player_name': player_name,
        'players': [p.to_dict() for p in game.players],
    }, to=game.code, include_self=False)
    return {'success': True, 'game': game.to_dict()}


def handle_start_game(data=None):
    try:
        game = _hosted_game(_get_sid())
        if game is None:
            return _fail('Only the host can start the game', 'NotHost')
        game = _registry().start_game(game.code)
    except GameError as exc:
        return exc.to_dict()
    payload = game.to_dict()
    emit('game_started', payload, to=game.code)
    return {'success': True, 'game': payload}


def handle_submit_ranking(data):
    ranking = (data or {}).get('ranking')
    if not isinstance(ranking, list) or not all(isinstance(name, str) for name in ranking):
        return _fail('ranking must be a list of player names')
    sid = _get_sid()
    registry = _registry()
    game = registry.get_game_for_player(sid)
    if game is None:
        return GameNotFound().to_dict()
    try:
        status = registry.submit_ranking(game.code, sid, ranking)
    except GameError as exc:
        return exc.to_dict()
    emit('player_submitted', dict(status.to_dict(), player_id=sid), to=game.code)

    if status.all_submitted:
        try:
            results = registry.calculate_round_results(game.code)
        except InvalidRound:
            # A concurrent final submission already scored and broadcast this round
            current_app.logger.info(f"[socket] round already scored game={game.code}")
        except GameError as exc:
            return exc.to_dict()
        else:
            emit('round_results', results.to_dict(), to=game.code)
    return dict(status.to_dict(), success=True)


def handle_next_round(data=None):
    try:
        game = _hosted_game(_get_sid())
        if game is None:
            return _fail('Only the host can advance the game', 'NotHost')
        advance = _registry().advance_to_next_round(game.code)
    except GameError as exc:
        return exc.to_dict()
    if advance.game_finished:
        emit('game_finished', {
            'final_scores': dict(advance.final_scores),
            'players': [p.to_dict() for p in game.players],
        }, to=game.code)
    else:
        emit('round_started', {
            'round': advance.new_round,
            'total_rounds': game.total_rounds,
            'prompt': advance.prompt.to_dict(),
        }, to=game.code)
    return dict(advance.to_dict(), success=True)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('create_game', handle_create_game, namespace=NAMESPACE)
    socketio.on_event('join_game', handle_join_game, namespace=NAMESPACE)
    socketio.on_event('start_game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('submit_ranking', handle_submit_ranking, namespace=NAMESPACE)
    socketio.on_event('next_round', handle_next_round, namespace=NAMESPACE)

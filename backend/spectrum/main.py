from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Spectrum game server!'})

@main.route('/health')
def health():
    registry = current_app.extensions['game_registry']
    return jsonify({'status': 'ok', 'games': len(registry.get_all_games())})

import random

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Game engine: one prompt store and one registry per app instance
    from spectrum.services.games import GameRegistry, PromptStore
    prompt_store = PromptStore(flask_app.config.get('PROMPTS_PATH'))
    seed = flask_app.config.get('RANDOM_SEED')
    registry = GameRegistry(
        prompt_store.get_catalog,
        total_rounds=int(flask_app.config.get('TOTAL_ROUNDS', 5)),
        min_players=int(flask_app.config.get('MIN_PLAYERS', 2)),
        rng=random.Random(seed) if seed is not None else None,
    )
    flask_app.extensions['prompt_store'] = prompt_store
    flask_app.extensions['game_registry'] = registry

    # Import and register blueprints here
    from spectrum.main import main
    flask_app.register_blueprint(main)

    from spectrum.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from spectrum.api.prompts import prompts
    flask_app.register_blueprint(prompts, url_prefix='/api/prompts')

    # Register Socket.IO event handlers
    from spectrum.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('prompts-stats')
    def prompts_stats_command():
        """Prints prompt catalog statistics for the configured source."""
        stats = prompt_store.stats()
        click.echo(f"Source: {stats['data_source']}")
        click.echo(f"Prompts: {stats['total_prompts']} in {stats['total_categories']} categories")
        for category, count in stats['prompts_by_category'].items():
            click.echo(f"  {category}: {count}")

    flask_app.cli.add_command(prompts_stats_command)

    return flask_app

import os
import random
import sys
import pytest

# Ensure the backend root (containing the `spectrum` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from spectrum import create_app, socketio
from spectrum.models import Prompt
from spectrum.services.games import GameRegistry, PromptCatalog


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    TOTAL_ROUNDS = 2
    MIN_PLAYERS = 2
    PROMPTS_PATH = None
    RANDOM_SEED = 1234
    CORS_ORIGINS = []
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def make_sio_client(flask_app):
    """Factory for Socket.IO test clients; each one is a separate player connection."""
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def sio_client(make_sio_client):
    return make_sio_client()


@pytest.fixture()
def catalog():
    prompts = [
        Prompt(id='height', category='physical', text='Rank by height'),
        Prompt(id='shoes', category='physical', text='Rank by shoe size'),
        Prompt(id='patience', category='personality', text='Rank by patience'),
        Prompt(id='optimism', category='personality', text='Rank by optimism'),
        Prompt(id='famous', category='future', text='Rank by fame likelihood'),
        Prompt(id='rich', category='future', text='Rank by future wealth'),
    ]
    categories = {'physical': {}, 'personality': {}, 'future': {}}
    return PromptCatalog(prompts, categories)


@pytest.fixture()
def registry(catalog):
    return GameRegistry(lambda: catalog, total_rounds=3, min_players=2, rng=random.Random(7))

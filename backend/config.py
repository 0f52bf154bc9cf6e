import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Rounds per game; one prompt is selected per round at start
    TOTAL_ROUNDS = int(os.environ.get('TOTAL_ROUNDS', '5'))
    # Minimum players required to start
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Prompt catalog JSON. Empty uses the packaged spectrum/data/prompts.json
    PROMPTS_PATH = os.environ.get('PROMPTS_PATH') or None
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Optional seed for game codes and prompt selection (reproducible sessions)
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000',
        ).split(',') if o.strip()
    ]

import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Room creation defaults, used when a setting is missing or non-numeric
    DEFAULT_ROUNDS = int(os.environ.get('DEFAULT_ROUNDS', '3'))
    DEFAULT_ROUND_TIME_SEC = int(os.environ.get('DEFAULT_ROUND_TIME_SEC', '60'))
    DEFAULT_GRID_SIZE = int(os.environ.get('DEFAULT_GRID_SIZE', '3'))
    # Upper bounds for client-supplied settings
    MAX_ROUNDS = int(os.environ.get('MAX_ROUNDS', '20'))
    MAX_ROUND_TIME_SEC = int(os.environ.get('MAX_ROUND_TIME_SEC', '600'))
    MAX_GRID_SIZE = int(os.environ.get('MAX_GRID_SIZE', '10'))
    # Candidate words offered to the drawer each turn
    WORD_CHOICES = int(os.environ.get('WORD_CHOICES', '3'))
    # Delayed continuations (seconds)
    GUESS_REVEAL_DELAY_SEC = float(os.environ.get('GUESS_REVEAL_DELAY_SEC', '3'))
    GRID_RESET_DELAY_SEC = float(os.environ.get('GRID_RESET_DELAY_SEC', '3'))
    ROOM_CODE_MAX_ATTEMPTS = int(os.environ.get('ROOM_CODE_MAX_ATTEMPTS', '50'))
    # Optional newline-separated word file; the built-in list is used otherwise
    WORDS_FILE = os.environ.get('WORDS_FILE')

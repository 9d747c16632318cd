from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
import threading
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, scheduler=None):
    """Build the Flask app and its room registry.

    ``scheduler`` replaces the Socket.IO background-task scheduler; tests pass
    one driven by a virtual clock.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from partyhost.services.broadcaster import Broadcaster
    from partyhost.services.games.scheduler import TaskScheduler
    from partyhost.services.games.words import Vocabulary
    from partyhost.services.rooms import RoomRegistry

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    lock = threading.RLock()
    registry = RoomRegistry(
        broadcaster=Broadcaster(socketio, namespace=namespace),
        scheduler=scheduler or TaskScheduler(socketio, lock),
        vocabulary=Vocabulary.from_config(flask_app.config),
        config=flask_app.config,
        lock=lock,
    )
    flask_app.extensions['partyhost'] = registry

    from partyhost.main import main
    flask_app.register_blueprint(main)

    from partyhost.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Handlers bind to the server created by init_app above
    from partyhost.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)
    flask_app.logger.info(f"[startup] namespace={namespace} words={len(registry.vocabulary)}")

    @click.command('words')
    @click.option('--sample', default=5, show_default=True, help='Number of example words to print.')
    def words_command(sample):
        """Show the size of the drawing vocabulary and a few sample words."""
        vocabulary = registry.vocabulary
        click.echo(f"{len(vocabulary)} words loaded")
        for word in vocabulary.pick(sample):
            click.echo(f"  {word}")

    flask_app.cli.add_command(words_command)

    return flask_app

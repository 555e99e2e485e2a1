from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    origins = config.get('CORS_ORIGINS') or '*'
    if origins == '*':
        return '*'
    return [o.strip() for o in origins.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _allowed_origins(flask_app.config)

    db.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from companion.store import GameStore
    from companion.broadcast import Broadcaster
    from companion.seed import seed_catalogs
    from companion.errors import GameError

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    store = GameStore(db, flask_app.logger)
    broadcaster = Broadcaster(socketio, namespace, flask_app.logger)
    flask_app.extensions['game_store'] = store
    flask_app.extensions['broadcaster'] = broadcaster

    from companion.api import register_api
    register_api(flask_app, store, broadcaster)

    from companion.socketio_events import register_socketio_handlers
    register_socketio_handlers(socketio, namespace)

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    data_dir = flask_app.config['SEED_DATA_DIR']

    # Schema is CREATE TABLE IF NOT EXISTS only; a failure here stops startup
    with flask_app.app_context():
        import companion.models  # noqa: F401
        db.create_all()
        if flask_app.config.get('SEED_ON_STARTUP', True):
            seed_catalogs(store, data_dir)

    @click.command('seed-db')
    def seed_db_command():
        """Loads the catalogs unless a game is already in progress."""
        with flask_app.app_context():
            db.create_all()
            if seed_catalogs(store, data_dir):
                print('Catalogs seeded!')
            else:
                print('Players exist; catalogs left as they are.')

    @click.command('reset-db')
    def reset_db_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seed_catalogs(store, data_dir, force=True)
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(seed_db_command)
    flask_app.cli.add_command(reset_db_command)

    return flask_app

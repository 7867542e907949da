from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import os
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

MIGRATIONS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'migrations'))


def _allowed_origins(config):
    origins = config.get('CORS_ALLOWED_ORIGINS') or '*'
    if isinstance(origins, (list, tuple)) and '*' in origins:
        return '*'
    return origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db, directory=MIGRATIONS_DIR)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Register models on db.metadata for create_all and migrations
    from timerbe import models  # noqa: F401

    from timerbe.main import main
    flask_app.register_blueprint(main)

    # One engine per app; handlers look it up through current_app.extensions
    from timerbe.services.timers import TimerEngine, InMemoryTimerStore, SqlAlchemyTimerStore
    store_kind = flask_app.config.get('TIMER_STORE', 'sql')
    if store_kind == 'memory':
        store = InMemoryTimerStore()
    elif store_kind == 'sql':
        store = SqlAlchemyTimerStore(db.session)
    else:
        raise ValueError(f"Unknown TIMER_STORE {store_kind!r}")
    flask_app.extensions['timer_engine'] = TimerEngine(store)
    flask_app.logger.info(f"[startup] store={store_kind} broadcast={flask_app.config.get('TIMER_BROADCAST')}")

    from timerbe.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the timer tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def build_game(flask_app):
    """Wire the registry, services and Socket.IO adapter for one app."""
    from bluff.channel import SocketChannel
    from bluff.registry import RoomRegistry
    from bluff.services import GameRules
    from bluff.services.penalty import PenaltyClock
    from bluff.services.phases import PhaseController
    from bluff.services.questions import QuestionBank
    from bluff.services.reveal import RevealSequencer
    from bluff.services.submissions import SubmissionTracker
    from bluff.socketio_events import ConnectionEventAdapter

    rules = GameRules.from_config(flask_app.config)
    channel = SocketChannel(socketio)
    registry = RoomRegistry()
    reveal = RevealSequencer(channel)
    controller = PhaseController(channel, QuestionBank.from_config(flask_app.config), rules, reveal=reveal)
    tracker = SubmissionTracker(controller, PenaltyClock(rules), channel, rules)
    return ConnectionEventAdapter(registry, controller, tracker, reveal, channel)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import and register blueprints here
    from bluff.main import main
    flask_app.register_blueprint(main)

    from bluff.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # One registry per app; handlers find it through current_app
    flask_app.extensions['bluff'] = build_game(flask_app)

    from bluff.socketio_events import register_socketio_handlers
    register_socketio_handlers(socketio)

    @click.command('questions')
    def questions_command():
        """Validates the configured question deck and lists its prompts."""
        adapter = flask_app.extensions['bluff']
        deck = adapter.controller.questions
        for question in deck.questions:
            click.echo(f"- {question.prompt}  [{question.answer}]")
        click.echo(f"{len(deck)} questions loaded.")

    flask_app.cli.add_command(questions_command)

    return flask_app

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, scheduler=None, broadcaster=None):
    """Build the Flask app, its Socket.IO gateway and the race coordinator.

    ``scheduler`` and ``broadcaster`` default to the Socket.IO server; tests
    pass fakes so countdowns and ticks can be driven step by step.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = [flask_app.config['CLIENT_URL']]
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from race_server.broadcast import SocketIOBroadcaster
    from race_server.services.games import GameService
    service = GameService.from_config(
        flask_app.config,
        broadcaster or SocketIOBroadcaster(socketio, namespace=namespace),
        scheduler or socketio,
        logger=flask_app.logger,
    )
    flask_app.extensions['race_service'] = service

    from race_server.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from race_server.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    if flask_app.config.get('SIMULATION_AUTOSTART') and not flask_app.config.get('TESTING'):
        service.start()

    return flask_app

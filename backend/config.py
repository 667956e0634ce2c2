import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Browser client allowed by CORS and the Socket.IO handshake
    CLIENT_URL = os.environ.get('CLIENT_URL') or 'http://localhost:3000'
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Simulation steps per second for the global ticker
    TICK_RATE = int(os.environ.get('TICK_RATE', '60'))
    # Start the global ticker when the app is created. Tests drive ticks by hand.
    SIMULATION_AUTOSTART = os.environ.get('SIMULATION_AUTOSTART', '1') not in ('0', 'false', 'False')
    COUNTDOWN_SECONDS = int(os.environ.get('COUNTDOWN_SECONDS', '3'))
    MAX_PLAYERS_PER_ROOM = 2
    # Vehicle tuning (world units per tick)
    ACCEL = float(os.environ.get('ACCEL', '0.5'))
    REVERSE_ACCEL = float(os.environ.get('REVERSE_ACCEL', '0.25'))
    TURN_RATE = float(os.environ.get('TURN_RATE', '0.06'))
    MIN_TURN_SPEED = float(os.environ.get('MIN_TURN_SPEED', '0.1'))
    MAX_SPEED = float(os.environ.get('MAX_SPEED', '8.0'))
    DRAG = float(os.environ.get('DRAG', '0.95'))
    # Track bounds
    TRACK_WIDTH = float(os.environ.get('TRACK_WIDTH', '1200'))
    TRACK_HEIGHT = float(os.environ.get('TRACK_HEIGHT', '800'))
    BOUNDARY_PADDING = float(os.environ.get('BOUNDARY_PADDING', '20'))

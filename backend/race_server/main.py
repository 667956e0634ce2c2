from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the race server!'})


@main.route('/rooms')
def list_rooms():
    """Active rooms with their seated players and phase."""
    service = current_app.extensions['race_service']
    return jsonify({'rooms': service.list_rooms()})


@main.route('/rooms/<string:room_id>')
def get_room(room_id):
    service = current_app.extensions['race_service']
    snapshot = service.snapshot(room_id)
    if snapshot is None:
        return jsonify({'error': 'Room not found'}), 404
    return jsonify(snapshot)

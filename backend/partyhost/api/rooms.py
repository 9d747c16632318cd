from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['partyhost']


@rooms.route('', methods=['GET'])
def list_rooms():
    """
    Lists live rooms, lobbies first, for a room browser.
    """
    registry = _registry()
    with registry.lock:
        summaries = [s.room.summary() for s in registry.rooms()]
    summaries.sort(key=lambda r: (r['state'] != 'LOBBY', r['roomCode']))
    return jsonify(summaries), 200


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    """
    Returns the same view clients receive in ``update_room``.
    """
    registry = _registry()
    with registry.lock:
        session = registry.get_room(room_code)
        if session is None:
            return jsonify({'error': 'Room not found'}), 404
        payload = session.room.to_dict()
    return jsonify(payload), 200

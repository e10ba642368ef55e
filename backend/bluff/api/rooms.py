from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>/state', methods=['GET'])
def get_room_state(room_code):
    """
    Returns a read-only snapshot of a room. Submitted lies, votes and bets
    stay hidden.
    """
    registry = current_app.extensions['bluff'].registry
    room = registry.lookup(room_code)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    with room.lock:
        payload = room.to_dict()
    payload['durations'] = {
        'writing': int(current_app.config.get('WRITING_TIME_LIMIT_SEC', 45)),
        'voting': int(current_app.config.get('VOTING_TIME_LIMIT_SEC', 45)),
    }
    return jsonify(payload)

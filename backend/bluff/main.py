from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Bluff game server!'})

@main.route('/health')
def health():
    registry = current_app.extensions['bluff'].registry
    return jsonify({'status': 'healthy', 'rooms': len(registry)})

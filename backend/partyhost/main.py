from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the party room server!'})

@main.route('/health')
def health():
    registry = current_app.extensions['partyhost']
    return jsonify({'status': 'ok', 'rooms': len(registry)})

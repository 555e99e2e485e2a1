from flask import Blueprint, jsonify

from companion.services import cards as card_service
from companion.services import players as player_service


def create_blueprint(store, broadcaster):
    state = Blueprint('state', __name__)

    @state.route('/health', methods=['GET'])
    def health():
        return jsonify({'message': 'Server is up and running!'})

    @state.route('/game-state', methods=['GET'])
    def game_state():
        return jsonify(player_service.game_state(store))

    @state.route('/decks', methods=['GET'])
    def decks():
        return jsonify(card_service.deck_counts(store))

    return state

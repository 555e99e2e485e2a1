from flask import Blueprint, jsonify

from companion import broadcast
from companion.api import publish
from companion.api.validation import json_body, require_int, require_str
from companion.errors import ValidationError
from companion.services import players as player_service
from companion.services import planets as planet_service


def create_blueprint(store, broadcaster):
    players = Blueprint('players', __name__)

    @players.route('/player/join', methods=['POST'])
    def join():
        data = json_body()
        name = data.get('name')
        if not isinstance(name, str):
            raise ValidationError('Player name is required')
        payload = player_service.join_player(store, name)
        return publish(broadcaster, broadcast.PLAYER_JOINED, payload, 201)

    @players.route('/player/<string:player_id>', methods=['GET'])
    def get_player(player_id):
        return jsonify(player_service.get_player(store, player_id))

    @players.route('/victory-points/update', methods=['POST'])
    def update_victory_points():
        data = json_body()
        player_id = require_str(data, 'playerId')
        points = require_int(data, 'points')
        payload = player_service.update_victory_points(store, player_id, points)
        return publish(broadcaster, broadcast.VICTORY_POINTS_UPDATED, payload)

    @players.route('/player/update-resources', methods=['POST'])
    def update_resources():
        data = json_body()
        player_id = require_str(data, 'playerId')
        counters = {
            field: require_int(data, field, minimum=0)
            for field in player_service.COUNTER_FIELDS
            if field in data
        }
        payload = player_service.update_counters(store, player_id, counters)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @players.route('/player/select-faction', methods=['POST'])
    def select_faction():
        data = json_body()
        player_id = require_str(data, 'playerId')
        faction_name = require_str(data, 'factionName')
        payload = player_service.select_faction(store, player_id, faction_name)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @players.route('/player/untap-all', methods=['POST'])
    def untap_all():
        data = json_body()
        player_id = require_str(data, 'playerId')
        payload = planet_service.untap_all(store, player_id)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @players.route('/factions', methods=['GET'])
    def factions():
        return jsonify(player_service.list_factions(store))

    return players

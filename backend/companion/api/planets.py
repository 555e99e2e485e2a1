from flask import Blueprint, jsonify

from companion import broadcast
from companion.api import publish
from companion.api.validation import (
    json_body, require_bool, require_int, require_int_list, require_str,
)
from companion.services import planets as planet_service


def create_blueprint(store, broadcaster):
    planets = Blueprint('planets', __name__)

    @planets.route('/planets', methods=['GET'])
    def list_planets():
        return jsonify(planet_service.list_planets(store))

    @planets.route('/planets/<int:planet_id>/attachments', methods=['GET'])
    def attachments(planet_id):
        return jsonify(planet_service.planet_attachments(store, planet_id))

    @planets.route('/planets/<int:planet_id>', methods=['DELETE'])
    def delete_planet(planet_id):
        payload = planet_service.delete_planet(store, planet_id)
        return publish(broadcaster, broadcast.PLANET_DELETED, payload)

    @planets.route('/player/assign-planets', methods=['POST'])
    def assign_planets():
        data = json_body()
        player_id = require_str(data, 'playerId')
        planet_ids = require_int_list(data, 'planetIds')
        payload = planet_service.assign_planets(store, player_id, planet_ids)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @planets.route('/player/update-tapped', methods=['POST'])
    def update_tapped():
        data = json_body()
        player_id = require_str(data, 'playerId')
        planet_id = require_int(data, 'planetId')
        tapped = require_bool(data, 'tapped')
        payload = planet_service.set_planet_tapped(store, player_id, planet_id, tapped)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @planets.route('/explore-planet', methods=['POST'])
    def explore_planet():
        data = json_body()
        player_id = require_str(data, 'playerId')
        planet_id = require_int(data, 'planetId')
        payload = planet_service.explore_planet(store, player_id, planet_id)
        return publish(broadcaster, broadcast.PLANET_EXPLORED, payload)

    @planets.route('/planets/attach', methods=['POST'])
    def attach():
        data = json_body()
        planet_id = require_int(data, 'planetId')
        card_ids = require_int_list(data, 'cardIds')
        payload = planet_service.attach_cards(store, planet_id, card_ids)
        return publish(broadcaster, broadcast.PLANET_UPDATED, payload)

    @planets.route('/planets/detach', methods=['POST'])
    def detach():
        data = json_body()
        planet_id = require_int(data, 'planetId')
        card_ids = require_int_list(data, 'cardIds')
        payload = planet_service.detach_cards(store, planet_id, card_ids)
        return publish(broadcaster, broadcast.PLANET_UPDATED, payload)

    return planets

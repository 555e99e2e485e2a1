from flask import Blueprint, jsonify, request

from companion import broadcast
from companion.api import publish
from companion.api.validation import (
    json_body, require_bool, require_int, require_int_list, require_str,
)
from companion.services import objectives as objective_service


def create_blueprint(store, broadcaster):
    objectives = Blueprint('objectives', __name__)

    @objectives.route('/objectives', methods=['GET'])
    def list_objectives():
        return jsonify(objective_service.list_objectives(store, request.args.get('type')))

    @objectives.route('/player/assign-objectives', methods=['POST'])
    def assign_objectives():
        data = json_body()
        player_id = require_str(data, 'playerId')
        objective_type = require_str(data, 'type')
        objective_ids = require_int_list(data, 'objectiveIds')
        payload = objective_service.assign_objectives(store, player_id, objective_type, objective_ids)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @objectives.route('/player/update-objective', methods=['POST'])
    def update_objective():
        data = json_body()
        player_id = require_str(data, 'playerId')
        objective_id = require_int(data, 'objectiveId')
        completed = require_bool(data, 'completed')
        payload = objective_service.set_objective_completed(store, player_id, objective_id, completed)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    return objectives

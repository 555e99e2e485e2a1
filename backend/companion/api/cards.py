from flask import Blueprint, jsonify, request

from companion import broadcast
from companion.api import publish
from companion.api.validation import (
    json_body, require_bool, require_int, require_int_list, require_str,
)
from companion.services import cards as card_service
from companion.services import relics as relic_service

# URL segment -> card kind
ASSIGN_ROUTES = {
    'assign-strategy-cards': 'strategy',
    'assign-action-cards': 'action',
    'assign-technologies': 'technology',
    'assign-relic-cards': 'relic',
}


def create_blueprint(store, broadcaster):
    cards = Blueprint('cards', __name__)

    @cards.route('/strategy-cards', methods=['GET'])
    def strategy_cards():
        return jsonify(card_service.list_cards(store, 'strategy'))

    @cards.route('/action-cards', methods=['GET'])
    def action_cards():
        return jsonify(card_service.list_cards(store, 'action'))

    @cards.route('/technology-cards', methods=['GET'])
    def technology_cards():
        return jsonify(card_service.list_cards(store, 'technology'))

    @cards.route('/relic-cards', methods=['GET'])
    def relic_cards():
        return jsonify(card_service.list_cards(store, 'relic'))

    @cards.route('/exploration-cards', methods=['GET'])
    def exploration_cards():
        return jsonify(card_service.list_exploration_cards(store, request.args.get('subtype')))

    def assign_view(kind):
        def assign_cards():
            data = json_body()
            player_id = require_str(data, 'playerId')
            card_ids = require_int_list(data, 'cardIds')
            payload = card_service.assign_cards(store, kind, player_id, card_ids)
            return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)
        return assign_cards

    for segment, kind in ASSIGN_ROUTES.items():
        cards.add_url_rule(
            f'/player/{segment}', endpoint=f'assign_{kind}_cards', view_func=assign_view(kind), methods=['POST']
        )

    @cards.route('/player/update-technology-tapped', methods=['POST'])
    def update_technology_tapped():
        data = json_body()
        player_id = require_str(data, 'playerId')
        card_id = require_int(data, 'cardId')
        tapped = require_bool(data, 'tapped')
        payload = card_service.set_technology_tapped(store, player_id, card_id, tapped)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    @cards.route('/strategy-cards/update-trade-goods', methods=['POST'])
    def update_trade_goods():
        data = json_body()
        card_id = require_int(data, 'cardId')
        increment = require_bool(data, 'increment')
        payload = card_service.update_trade_goods(store, card_id, increment)
        return publish(broadcaster, broadcast.TRADE_GOOD_UPDATED, payload)

    @cards.route('/combine-relic-fragments', methods=['POST'])
    def combine_relic_fragments():
        data = json_body()
        player_id = require_str(data, 'playerId')
        fragment_ids = require_int_list(data, 'fragmentIds')
        payload = relic_service.combine_relic_fragments(store, player_id, fragment_ids)
        return publish(broadcaster, broadcast.PLAYER_UPDATED, payload)

    return cards

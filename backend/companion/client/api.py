"""HTTP wrapper around the companion REST routes."""
import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class ApiError(Exception):
    def __init__(self, status_code, message):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message


class ApiClient:
    def __init__(self, base_url='http://localhost:5000', timeout=DEFAULT_TIMEOUT, client=None):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _handle(self, response):
        if response.status_code >= 400:
            try:
                message = response.json().get('error', response.text)
            except ValueError:
                message = response.text
            logger.warning("%s %s failed: %s %s", response.request.method, response.request.url,
                           response.status_code, message)
            raise ApiError(response.status_code, message)
        return response.json()

    def get(self, path, params=None):
        return self._handle(self._client.get(f'/api{path}', params=params))

    def post(self, path, payload):
        return self._handle(self._client.post(f'/api{path}', json=payload))

    def delete(self, path):
        return self._handle(self._client.delete(f'/api{path}'))

    # ---- reads ----

    def health(self):
        return self.get('/health')

    def game_state(self):
        return self.get('/game-state')

    def player(self, player_id):
        return self.get(f'/player/{player_id}')

    def planets(self):
        return self.get('/planets')

    def planet_attachments(self, planet_id):
        return self.get(f'/planets/{planet_id}/attachments')

    def factions(self):
        return self.get('/factions')

    def objectives(self, objective_type=None):
        return self.get('/objectives', params={'type': objective_type} if objective_type else None)

    def exploration_cards(self, subtype=None):
        return self.get('/exploration-cards', params={'subtype': subtype} if subtype else None)

    def cards(self, kind):
        return self.get(f'/{kind}-cards')

    def decks(self):
        return self.get('/decks')

    # ---- mutations ----

    def join(self, name):
        return self.post('/player/join', {'name': name})

    def update_victory_points(self, player_id, points):
        return self.post('/victory-points/update', {'playerId': player_id, 'points': points})

    def update_counters(self, player_id, **counters):
        return self.post('/player/update-resources', {'playerId': player_id, **counters})

    def select_faction(self, player_id, faction_name):
        return self.post('/player/select-faction', {'playerId': player_id, 'factionName': faction_name})

    def assign_planets(self, player_id, planet_ids):
        return self.post('/player/assign-planets', {'playerId': player_id, 'planetIds': list(planet_ids)})

    def update_planet_tapped(self, player_id, planet_id, tapped):
        return self.post('/player/update-tapped', {'playerId': player_id, 'planetId': planet_id, 'tapped': tapped})

    def untap_all(self, player_id):
        return self.post('/player/untap-all', {'playerId': player_id})

    def explore_planet(self, player_id, planet_id):
        return self.post('/explore-planet', {'playerId': player_id, 'planetId': planet_id})

    def attach_cards(self, planet_id, card_ids):
        return self.post('/planets/attach', {'planetId': planet_id, 'cardIds': list(card_ids)})

    def detach_cards(self, planet_id, card_ids):
        return self.post('/planets/detach', {'planetId': planet_id, 'cardIds': list(card_ids)})

    def delete_planet(self, planet_id):
        return self.delete(f'/planets/{planet_id}')

    def combine_relic_fragments(self, player_id, fragment_ids):
        return self.post('/combine-relic-fragments', {'playerId': player_id, 'fragmentIds': list(fragment_ids)})

    def assign_cards(self, kind, player_id, card_ids):
        segment = 'assign-technologies' if kind == 'technology' else f'assign-{kind}-cards'
        return self.post(f'/player/{segment}', {'playerId': player_id, 'cardIds': list(card_ids)})

    def update_technology_tapped(self, player_id, card_id, tapped):
        return self.post('/player/update-technology-tapped', {'playerId': player_id, 'cardId': card_id, 'tapped': tapped})

    def update_trade_goods(self, card_id, increment):
        return self.post('/strategy-cards/update-trade-goods', {'cardId': card_id, 'increment': increment})

    def assign_objectives(self, player_id, objective_type, objective_ids):
        return self.post('/player/assign-objectives', {
            'playerId': player_id, 'type': objective_type, 'objectiveIds': list(objective_ids),
        })

    def update_objective(self, player_id, objective_id, completed):
        return self.post('/player/update-objective', {
            'playerId': player_id, 'objectiveId': objective_id, 'completed': completed,
        })

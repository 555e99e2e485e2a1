"""Process-wide game state container for a companion client."""
import logging
import threading

from companion.broadcast import (
    EVENTS, PLAYER_JOINED, PLAYER_UPDATED, PLANET_DELETED, PLANET_EXPLORED,
    PLANET_UPDATED, TRADE_GOOD_UPDATED, VICTORY_POINTS_UPDATED,
)
from companion.client.reducer import apply_event
from companion.client.session import SessionStore

logger = logging.getLogger(__name__)


class GameStateContainer:
    """Holds the last snapshot plus this client's identity.

    Every change, whether it comes back from one of our own requests or in
    over the socket, goes through ``apply_event``, so the held snapshot is
    always the last full fetch folded with the notification stream.
    """

    def __init__(self, api, session_store=None):
        self.api = api
        self.session_store = session_store or SessionStore()
        identity = self.session_store.load()
        self.player_id = identity.get('playerId')
        self.player_name = identity.get('playerName')
        self.snapshot = None
        self._listeners = []
        self._lock = threading.RLock()

    # ---- snapshot ----

    def bootstrap(self):
        """Fetch the first snapshot. Call once at startup."""
        self.refresh()
        if self.player_id and self.current_player() is None:
            logger.info("Stored player %s is not in this game; clearing session", self.player_id)
            self.logout()
        return self

    def refresh(self):
        self.set_snapshot(self.api.game_state())
        return self.snapshot

    def set_snapshot(self, snapshot):
        with self._lock:
            self.snapshot = snapshot
        self._notify()

    def apply(self, event, payload):
        with self._lock:
            self.snapshot = apply_event(self.snapshot, event, payload)
        self._notify()
        return payload

    def subscribe(self, listener):
        """Call ``listener(snapshot)`` after every change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.snapshot)

    def attach(self, sio, namespace='/ws'):
        """Route every broadcast event from a python-socketio client into ``apply``."""
        for event in EVENTS:
            sio.on(event, handler=self._event_handler(event), namespace=namespace)

    def _event_handler(self, event):
        def handler(data):
            logger.debug("Received %s", event)
            self.apply(event, data)
        return handler

    def current_player(self):
        if not self.snapshot or not self.player_id:
            return None
        for player in self.snapshot.get('players', []):
            if player.get('id') == self.player_id:
                return player
        return None

    # ---- session ----

    def join(self, name):
        payload = self.api.join(name)
        self.player_id = payload['playerId']
        self.player_name = payload['name']
        self.session_store.save(self.player_id, self.player_name)
        if self.snapshot is None:
            self.refresh()
            return payload
        return self.apply(PLAYER_JOINED, payload)

    def logout(self):
        self.player_id = None
        self.player_name = None
        self.session_store.clear()

    def _require_player(self):
        if not self.player_id:
            raise RuntimeError('Join the game before making changes')
        return self.player_id

    # ---- per-entity updates ----

    def update_victory_points(self, points):
        return self.apply(VICTORY_POINTS_UPDATED, self.api.update_victory_points(self._require_player(), points))

    def update_counters(self, **counters):
        return self.apply(PLAYER_UPDATED, self.api.update_counters(self._require_player(), **counters))

    def select_faction(self, faction_name):
        return self.apply(PLAYER_UPDATED, self.api.select_faction(self._require_player(), faction_name))

    def assign_planets(self, planet_ids):
        return self.apply(PLAYER_UPDATED, self.api.assign_planets(self._require_player(), planet_ids))

    def set_planet_tapped(self, planet_id, tapped):
        return self.apply(PLAYER_UPDATED, self.api.update_planet_tapped(self._require_player(), planet_id, tapped))

    def untap_all(self):
        return self.apply(PLAYER_UPDATED, self.api.untap_all(self._require_player()))

    def explore_planet(self, planet_id):
        return self.apply(PLANET_EXPLORED, self.api.explore_planet(self._require_player(), planet_id))

    def attach_cards(self, planet_id, card_ids):
        return self.apply(PLANET_UPDATED, self.api.attach_cards(planet_id, card_ids))

    def detach_cards(self, planet_id, card_ids):
        return self.apply(PLANET_UPDATED, self.api.detach_cards(planet_id, card_ids))

    def delete_planet(self, planet_id):
        return self.apply(PLANET_DELETED, self.api.delete_planet(planet_id))

    def combine_relic_fragments(self, fragment_ids):
        return self.apply(PLAYER_UPDATED, self.api.combine_relic_fragments(self._require_player(), fragment_ids))

    def assign_cards(self, kind, card_ids):
        return self.apply(PLAYER_UPDATED, self.api.assign_cards(kind, self._require_player(), card_ids))

    def set_technology_tapped(self, card_id, tapped):
        return self.apply(PLAYER_UPDATED, self.api.update_technology_tapped(self._require_player(), card_id, tapped))

    def update_trade_goods(self, card_id, increment):
        return self.apply(TRADE_GOOD_UPDATED, self.api.update_trade_goods(card_id, increment))

    def assign_objectives(self, objective_type, objective_ids):
        return self.apply(PLAYER_UPDATED, self.api.assign_objectives(self._require_player(), objective_type, objective_ids))

    def set_objective_completed(self, objective_id, completed):
        return self.apply(PLAYER_UPDATED, self.api.update_objective(self._require_player(), objective_id, completed))

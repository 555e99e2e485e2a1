"""Best-effort fan-out of mutation payloads to every connected client."""

PLAYER_JOINED = 'player-joined'
PLAYER_UPDATED = 'player-updated'
VICTORY_POINTS_UPDATED = 'victory-points-updated'
PLANET_EXPLORED = 'planet-explored'
PLANET_UPDATED = 'planet-updated'
PLANET_DELETED = 'planet-deleted'
TRADE_GOOD_UPDATED = 'tradeGoodUpdated'

EVENTS = (
    PLAYER_JOINED,
    PLAYER_UPDATED,
    VICTORY_POINTS_UPDATED,
    PLANET_EXPLORED,
    PLANET_UPDATED,
    PLANET_DELETED,
    TRADE_GOOD_UPDATED,
)


class Broadcaster:
    def __init__(self, socketio, namespace, logger):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger

    def publish(self, event, payload):
        """Emit ``payload`` under ``event`` to every client on the namespace.

        Nothing is persisted or acknowledged; a failed emit is logged and the
        mutation that triggered it still stands.
        """
        try:
            self.socketio.emit(event, payload, namespace=self.namespace)
        except Exception as exc:
            self.logger.warning(f"[broadcast] {event} not delivered: {exc}")
            return
        self.logger.info(f"[broadcast] {event}")

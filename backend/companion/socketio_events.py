from flask import current_app, request
from flask_socketio import emit

from companion import broadcast


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[socket] connected sid={_get_sid()}")
    emit('connected', {'message': 'Connected to game channel'})


def handle_disconnect(*args):
    current_app.logger.info(f"[socket] disconnected sid={_get_sid()}")


def handle_update_victory_points(data):
    """Relay a client's victory point change to everyone; nothing is stored."""
    emit(broadcast.VICTORY_POINTS_UPDATED, data or {}, broadcast=True)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(socketio, namespace) -> None:
    """Register Socket.IO event handlers on the game namespace.

    Clients join the broadcast group just by connecting; there are no rooms.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('update-victory-points', handle_update_victory_points, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)

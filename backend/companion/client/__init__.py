"""Client-side state container for companion front ends.

Typical wiring::

    import socketio
    from companion.client import ApiClient, GameStateContainer

    container = GameStateContainer(ApiClient('http://localhost:5000')).bootstrap()
    sio = socketio.Client()
    container.attach(sio)
    sio.connect('http://localhost:5000', namespaces=['/ws'])
"""
from companion.client.api import ApiClient, ApiError
from companion.client.container import GameStateContainer
from companion.client.reducer import apply_event, empty_snapshot
from companion.client.session import SessionStore

__all__ = ['ApiClient', 'ApiError', 'GameStateContainer', 'SessionStore', 'apply_event', 'empty_snapshot']

import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = os.path.join(os.path.expanduser('~'), '.galaxy-companion', 'session.json')


class SessionStore:
    """Remembers which player this client registered as, across restarts."""

    def __init__(self, path=None):
        self.path = path or os.environ.get('COMPANION_SESSION_PATH') or DEFAULT_SESSION_PATH

    def load(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: data[k] for k in ('playerId', 'playerName') if k in data}

    def save(self, player_id, player_name):
        os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as fh:
            json.dump({'playerId': player_id, 'playerName': player_name}, fh)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)

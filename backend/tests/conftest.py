import os
import sys
import pytest

# Ensure the backend root (containing the `companion` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from companion import create_app, db, socketio
from companion.models import (
    ExplorationCard, ExplorationDeck, PlayerExplorationCard, RelicDeck,
)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = '*'
    SEED_ON_STARTUP = True
    SEED_DATA_DIR = os.path.join(BACKEND_ROOT, 'companion', 'data')
    SOCKETIO_NAMESPACE = '/ws'
    PORT = 5000


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    return flask_app.extensions['game_store']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def join(client, name):
    res = client.post('/api/player/join', json={'name': name})
    assert res.status_code == 201, res.get_json()
    return res.get_json()


def player_entry(client, player_id):
    state = client.get('/api/game-state').get_json()
    return next(p for p in state['players'] if p['id'] == player_id)


def stack_exploration_deck(card_type, subtype):
    """Leave exactly one card of ``card_type`` in the deck, of the given subtype."""
    card = ExplorationCard.query.filter_by(type=card_type, subtype=subtype).first()
    type_ids = [c.id for c in ExplorationCard.query.filter_by(type=card_type).all()]
    ExplorationDeck.query.filter(ExplorationDeck.card_id.in_(type_ids)).delete(synchronize_session=False)
    db.session.add(ExplorationDeck(card_id=card.id))
    db.session.commit()
    return card.id


def empty_exploration_deck(card_type):
    type_ids = [c.id for c in ExplorationCard.query.filter_by(type=card_type).all()]
    ExplorationDeck.query.filter(ExplorationDeck.card_id.in_(type_ids)).delete(synchronize_session=False)
    db.session.commit()


def empty_relic_deck():
    RelicDeck.query.delete()
    db.session.commit()


def give_fragments(player_id, *card_types):
    """Put one relic fragment per requested type in the player's hand; returns card ids."""
    ids = []
    for card_type in card_types:
        card = (
            ExplorationCard.query
            .filter_by(type=card_type, subtype='relic_fragment')
            .filter(ExplorationCard.id.notin_(ids))
            .first()
        )
        db.session.add(PlayerExplorationCard(player_id=player_id, card_id=card.id))
        ids.append(card.id)
    db.session.commit()
    return ids

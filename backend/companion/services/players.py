from sqlalchemy.exc import IntegrityError

from companion.errors import Conflict, NotFound, ValidationError
from companion.models import Faction, Player

# Request field -> column
COUNTER_FIELDS = {
    'resources': 'resources',
    'influence': 'influence',
    'commodities': 'commodities',
    'tradeGoods': 'trade_goods',
}


def join_player(store, name):
    """Register a new player with zeroed counters.

    The name is trimmed and compared case-sensitively. A taken name raises
    ``Conflict`` whether it is caught by the pre-query or by the unique
    constraint when two registrations race.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError('Player name is required')

    with store.transaction('register player') as session:
        if Player.query.filter_by(name=name).first():
            raise Conflict('Player name already taken')
        player = Player(name=name)
        session.add(player)
        try:
            session.flush()
        except IntegrityError:
            raise Conflict('Player name already taken')
        payload = {
            'playerId': player.id,
            'name': player.name,
            'player': store.player_state(player),
        }
    store.logger.info(f"[join] player={payload['playerId']} name={name}")
    return payload


def get_player(store, player_id):
    with store.transaction('fetch player'):
        player = store.get_player(player_id)
        return {'player': store.player_state(player)}


def update_victory_points(store, player_id, points):
    """Overwrite the player's victory points. Last write wins."""
    with store.transaction('update victory points') as session:
        player = store.get_player(player_id)
        player.victory_points = points
        session.flush()
        payload = {
            'message': f'Victory points updated for player {player_id}',
            'player': store.player_state(player),
            'victoryPoints': {player_id: points},
        }
    store.logger.info(f"[victory-points] player={player_id} points={points}")
    return payload


def update_counters(store, player_id, counters):
    """Overwrite any subset of resources/influence/commodities/tradeGoods."""
    if not counters:
        raise ValidationError('At least one counter is required')

    with store.transaction('update player counters') as session:
        player = store.get_player(player_id)
        for field, value in counters.items():
            setattr(player, COUNTER_FIELDS[field], value)
        session.flush()
        return {'player': store.player_state(player)}


def select_faction(store, player_id, faction_name):
    """Point the player at a faction by name. Two players may pick the same one."""
    with store.transaction('select faction') as session:
        player = store.get_player(player_id)
        faction = Faction.query.filter_by(name=faction_name).first()
        if not faction:
            raise NotFound('Faction not found')
        player.faction = faction.name
        session.flush()
        payload = {'player': store.player_state(player), 'faction': faction.to_dict()}
    store.logger.info(f"[faction] player={player_id} faction={faction_name}")
    return payload


def list_factions(store):
    with store.transaction('fetch factions'):
        return [f.to_dict() for f in Faction.query.order_by(Faction.name).all()]


def game_state(store):
    with store.transaction('fetch game state'):
        return store.snapshot()

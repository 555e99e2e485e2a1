"""Pure snapshot reducer shared by every server notification.

``apply_event`` never mutates its inputs. It looks at which entity keys the
payload carries rather than at the event name, so an HTTP response body and
the matching broadcast fold into the snapshot identically.
"""
from companion.broadcast import PLANET_DELETED, VICTORY_POINTS_UPDATED


def empty_snapshot():
    return {'players': [], 'objectives': [], 'victoryPoints': {}}


def _sorted_players(players):
    # Matches the server's ORDER BY name
    return sorted(players, key=lambda p: p.get('name') or '')


def _upsert_player(state, player):
    players = [p for p in state['players'] if p.get('id') != player.get('id')]
    players.append(dict(player))
    victory_points = dict(state['victoryPoints'])
    if 'victoryPoints' in player:
        victory_points[player['id']] = player['victoryPoints']
    return {**state, 'players': _sorted_players(players), 'victoryPoints': victory_points}


def _merge_victory_points(state, points):
    victory_points = dict(state['victoryPoints'])
    players = []
    for player in state['players']:
        if player.get('id') in points:
            player = {**player, 'victoryPoints': points[player['id']]}
        players.append(player)
    victory_points.update(points)
    return {**state, 'players': players, 'victoryPoints': victory_points}


def _replace_planet(state, planet):
    players = []
    for player in state['players']:
        planets = player.get('planets')
        if planets and any(p.get('id') == planet.get('id') for p in planets):
            planets = [
                {**planet, 'tapped': p.get('tapped', False)} if p.get('id') == planet.get('id') else p
                for p in planets
            ]
            player = {**player, 'planets': planets}
        players.append(player)
    return {**state, 'players': players}


def _drop_planet(state, planet_id):
    players = []
    for player in state['players']:
        planets = player.get('planets')
        if planets and any(p.get('id') == planet_id for p in planets):
            player = {**player, 'planets': [p for p in planets if p.get('id') != planet_id]}
        players.append(player)
    return {**state, 'players': players}


def _replace_strategy_card(state, card):
    players = []
    for player in state['players']:
        cards = player.get('strategyCards')
        if cards and any(c.get('id') == card.get('id') for c in cards):
            player = {
                **player,
                'strategyCards': [dict(card) if c.get('id') == card.get('id') else c for c in cards],
            }
        players.append(player)
    return {**state, 'players': players}


def _flat_points(payload):
    # A relayed update-victory-points may be a bare {playerId: points} map
    if payload and all(
        isinstance(k, str) and isinstance(v, int) and not isinstance(v, bool)
        for k, v in payload.items()
    ):
        return dict(payload)
    return None


def apply_event(snapshot, event, payload):
    """Fold one notification into ``snapshot`` and return the new snapshot."""
    if snapshot is None or not isinstance(payload, dict):
        return snapshot
    state = {
        'players': list(snapshot.get('players', [])),
        'objectives': list(snapshot.get('objectives', [])),
        'victoryPoints': dict(snapshot.get('victoryPoints', {})),
    }

    flat = _flat_points(payload) if event == VICTORY_POINTS_UPDATED else None
    if flat is not None:
        return _merge_victory_points(state, flat)

    if event == PLANET_DELETED and 'planetId' in payload:
        state = _drop_planet(state, payload['planetId'])
    if isinstance(payload.get('player'), dict):
        state = _upsert_player(state, payload['player'])
    if isinstance(payload.get('planet'), dict):
        state = _replace_planet(state, payload['planet'])
    if isinstance(payload.get('strategyCard'), dict):
        state = _replace_strategy_card(state, payload['strategyCard'])
    if isinstance(payload.get('victoryPoints'), dict):
        state = _merge_victory_points(state, payload['victoryPoints'])
    return state

import pytest

from companion import db
from companion.models import PlayerExplorationCard, PlayerRelicCard, RelicDeck
from companion.services.relics import fragments_compatible
from conftest import empty_relic_deck, give_fragments, join, player_entry


@pytest.mark.parametrize('types', [
    ['cultural', 'cultural', 'cultural'],
    ['frontier', 'frontier', 'frontier'],
    ['hazardous', 'hazardous', 'frontier'],
    ['frontier', 'industrial', 'industrial'],
])
def test_fragments_compatible(types):
    assert fragments_compatible(types)


@pytest.mark.parametrize('types', [
    ['cultural', 'hazardous', 'industrial'],
    ['cultural', 'cultural', 'hazardous'],
    ['cultural', 'frontier', 'frontier'],
    ['cultural', 'cultural'],
    ['cultural'] * 4,
])
def test_fragments_incompatible(types):
    assert not fragments_compatible(types)


def _hand(pid):
    return {row.card_id for row in PlayerExplorationCard.query.filter_by(player_id=pid).all()}


def test_combine_fragments_grants_relic(client):
    pid = join(client, 'Alice')['playerId']
    fragment_ids = give_fragments(pid, 'cultural', 'cultural', 'frontier')
    relics_before = RelicDeck.query.count()

    res = client.post('/api/combine-relic-fragments', json={'playerId': pid, 'fragmentIds': fragment_ids})
    assert res.status_code == 200
    data = res.get_json()
    assert data['fragmentIds'] == fragment_ids
    assert [r['id'] for r in data['player']['relicCards']] == [data['relic']['id']]
    assert data['player']['explorationCards'] == []
    assert _hand(pid) == set()
    assert RelicDeck.query.count() == relics_before - 1
    assert RelicDeck.query.filter_by(card_id=data['relic']['id']).first() is None


def test_combine_mismatched_fragments_keeps_hand(client):
    pid = join(client, 'Alice')['playerId']
    fragment_ids = give_fragments(pid, 'cultural', 'hazardous', 'industrial')
    res = client.post('/api/combine-relic-fragments', json={'playerId': pid, 'fragmentIds': fragment_ids})
    assert res.status_code == 400
    assert _hand(pid) == set(fragment_ids)
    assert PlayerRelicCard.query.filter_by(player_id=pid).count() == 0


def test_combine_requires_three_distinct_fragments(client):
    pid = join(client, 'Alice')['playerId']
    fragment_ids = give_fragments(pid, 'hazardous', 'hazardous', 'hazardous')
    url = '/api/combine-relic-fragments'
    assert client.post(url, json={'playerId': pid, 'fragmentIds': fragment_ids[:2]}).status_code == 400
    assert client.post(url, json={'playerId': pid, 'fragmentIds': fragment_ids + [fragment_ids[0]]}).status_code == 400
    dupes = [fragment_ids[0], fragment_ids[0], fragment_ids[1]]
    assert client.post(url, json={'playerId': pid, 'fragmentIds': dupes}).status_code == 400
    assert _hand(pid) == set(fragment_ids)


def test_combine_fragments_must_be_in_hand(client):
    alice = join(client, 'Alice')['playerId']
    bob = join(client, 'Bob')['playerId']
    fragment_ids = give_fragments(bob, 'industrial', 'industrial', 'industrial')
    res = client.post('/api/combine-relic-fragments', json={'playerId': alice, 'fragmentIds': fragment_ids})
    assert res.status_code == 404
    assert _hand(bob) == set(fragment_ids)


def test_combine_rejects_non_fragment_cards(client):
    pid = join(client, 'Alice')['playerId']
    fragment_ids = give_fragments(pid, 'cultural', 'cultural')
    other = client.get('/api/exploration-cards?subtype=resolve').get_json()
    resolve_id = next(c['id'] for c in other if c['type'] == 'cultural')
    db.session.add(PlayerExplorationCard(player_id=pid, card_id=resolve_id))
    db.session.commit()
    res = client.post('/api/combine-relic-fragments', json={
        'playerId': pid, 'fragmentIds': fragment_ids + [resolve_id],
    })
    assert res.status_code == 400
    assert set(fragment_ids) <= _hand(pid)


def test_combine_with_empty_relic_deck_keeps_fragments(client):
    pid = join(client, 'Alice')['playerId']
    fragment_ids = give_fragments(pid, 'industrial', 'industrial', 'industrial')
    empty_relic_deck()
    res = client.post('/api/combine-relic-fragments', json={'playerId': pid, 'fragmentIds': fragment_ids})
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Relic deck is empty'
    assert _hand(pid) == set(fragment_ids)
    assert player_entry(client, pid)['relicCards'] == []


def test_assigned_relics_leave_the_deck(client):
    pid = join(client, 'Alice')['playerId']
    res = client.post('/api/player/assign-relic-cards', json={'playerId': pid, 'cardIds': [2, 5]})
    assert res.status_code == 200
    assert RelicDeck.query.filter(RelicDeck.card_id.in_([2, 5])).count() == 0
    assert client.get('/api/decks').get_json()['relics'] == 11


def test_combine_after_every_relic_assigned_is_empty_deck(client):
    pid = join(client, 'Alice')['playerId']
    relic_ids = [r['id'] for r in client.get('/api/relic-cards').get_json()]
    client.post('/api/player/assign-relic-cards', json={'playerId': pid, 'cardIds': relic_ids})
    fragment_ids = give_fragments(pid, 'cultural', 'cultural', 'cultural')

    res = client.post('/api/combine-relic-fragments', json={'playerId': pid, 'fragmentIds': fragment_ids})
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Relic deck is empty'
    assert _hand(pid) == set(fragment_ids)
    assert len(player_entry(client, pid)['relicCards']) == len(relic_ids)


def test_relic_draw_skips_relics_already_held(client):
    alice = join(client, 'Alice')['playerId']
    bob = join(client, 'Bob')['playerId']
    # relic 1 stays in the deck but Bob already holds it
    RelicDeck.query.filter(RelicDeck.card_id != 1).delete(synchronize_session=False)
    db.session.add(PlayerRelicCard(player_id=bob, card_id=1))
    db.session.commit()
    fragment_ids = give_fragments(alice, 'hazardous', 'hazardous', 'frontier')

    res = client.post('/api/combine-relic-fragments', json={'playerId': alice, 'fragmentIds': fragment_ids})
    assert res.status_code == 404
    assert _hand(alice) == set(fragment_ids)
    assert PlayerRelicCard.query.filter_by(player_id=alice).count() == 0

def test_trade_goods_floor_at_zero(client):
    url = '/api/strategy-cards/update-trade-goods'
    res = client.post(url, json={'cardId': 3, 'increment': False})
    assert res.status_code == 200
    assert res.get_json()['strategyCard']['tradeGoods'] == 0

    client.post(url, json={'cardId': 3, 'increment': True})
    res = client.post(url, json={'cardId': 3, 'increment': True})
    assert res.get_json()['strategyCard']['tradeGoods'] == 2
    res = client.post(url, json={'cardId': 3, 'increment': False})
    assert res.get_json()['strategyCard']['tradeGoods'] == 1


def test_trade_goods_errors(client):
    url = '/api/strategy-cards/update-trade-goods'
    assert client.post(url, json={'cardId': 99, 'increment': True}).status_code == 404
    assert client.post(url, json={'cardId': 1, 'increment': 1}).status_code == 400


def test_assign_strategy_and_technology_cards(client):
    pid = join(client, 'Alice')['playerId']
    res = client.post('/api/player/assign-strategy-cards', json={'playerId': pid, 'cardIds': [8, 1]})
    assert res.status_code == 200
    assert [c['initiative'] for c in res.get_json()['player']['strategyCards']] == [1, 8]

    res = client.post('/api/player/assign-strategy-cards', json={'playerId': pid, 'cardIds': [2]})
    assert [c['id'] for c in res.get_json()['player']['strategyCards']] == [2]

    res = client.post('/api/player/assign-technologies', json={'playerId': pid, 'cardIds': [1, 2]})
    techs = res.get_json()['player']['technologies']
    assert [(t['id'], t['tapped']) for t in techs] == [(1, False), (2, False)]

    res = client.post('/api/player/assign-action-cards', json={'playerId': pid, 'cardIds': [3]})
    assert [c['id'] for c in res.get_json()['player']['actionCards']] == [3]

    res = client.post('/api/player/assign-relic-cards', json={'playerId': pid, 'cardIds': [1]})
    assert [c['id'] for c in res.get_json()['player']['relicCards']] == [1]

    res = client.post('/api/player/assign-technologies', json={'playerId': 'ghost', 'cardIds': [1]})
    assert res.status_code == 404


def test_shared_strategy_card_trade_goods_reach_every_holder(client):
    alice = join(client, 'Alice')['playerId']
    client.post('/api/player/assign-strategy-cards', json={'playerId': alice, 'cardIds': [7]})
    client.post('/api/strategy-cards/update-trade-goods', json={'cardId': 7, 'increment': True})
    card = player_entry(client, alice)['strategyCards'][0]
    assert card['tradeGoods'] == 1


def test_technology_tapped(client):
    pid = join(client, 'Alice')['playerId']
    client.post('/api/player/assign-technologies', json={'playerId': pid, 'cardIds': [4]})
    url = '/api/player/update-technology-tapped'
    res = client.post(url, json={'playerId': pid, 'cardId': 4, 'tapped': True})
    assert res.status_code == 200
    assert res.get_json()['player']['technologies'][0]['tapped'] is True
    assert client.post(url, json={'playerId': pid, 'cardId': 5, 'tapped': True}).status_code == 404


def test_card_catalogs(client):
    assert len(client.get('/api/strategy-cards').get_json()) == 8
    assert all('tradeGoods' in c for c in client.get('/api/strategy-cards').get_json())
    assert client.get('/api/technology-cards').get_json()[0]['type'] == 'biotic'
    assert client.get('/api/action-cards').get_json()[1]['phase'] == 'agenda'
    assert len(client.get('/api/relic-cards').get_json()) == 13


def test_decks_endpoint_tracks_draws(client):
    before = client.get('/api/decks').get_json()
    assert before['exploration'] == {'cultural': 20, 'hazardous': 20, 'industrial': 20, 'frontier': 14}
    assert before['relics'] == 13

    pid = join(client, 'Alice')['playerId']
    client.post('/api/explore-planet', json={'playerId': pid, 'planetId': 2})
    after = client.get('/api/decks').get_json()
    assert after['exploration']['hazardous'] == 19
    assert after['exploration']['cultural'] == 20

from sqlalchemy import delete

from companion.errors import NotFound, ValidationError
from companion.models import (
    ActionCard, ExplorationCard, PlayerActionCard, PlayerRelicCard,
    PlayerStrategyCard, PlayerTechnology, RelicCard, RelicDeck, StrategyCard,
    TechnologyCard, EXPLORATION_SUBTYPES,
)

# kind -> (catalog model, ownership model)
CARD_KINDS = {
    'strategy': (StrategyCard, PlayerStrategyCard),
    'action': (ActionCard, PlayerActionCard),
    'technology': (TechnologyCard, PlayerTechnology),
    'relic': (RelicCard, PlayerRelicCard),
}


def list_cards(store, kind):
    model = CARD_KINDS[kind][0]
    with store.transaction(f'fetch {kind} cards'):
        return [c.to_dict() for c in model.query.order_by(model.id).all()]


def list_exploration_cards(store, subtype=None):
    if subtype is not None and subtype not in EXPLORATION_SUBTYPES:
        raise ValidationError('Unknown exploration card subtype')
    with store.transaction('fetch exploration cards'):
        query = ExplorationCard.query
        if subtype:
            query = query.filter_by(subtype=subtype)
        return [c.to_dict() for c in query.order_by(ExplorationCard.id).all()]


def deck_counts(store):
    with store.transaction('fetch deck counts'):
        return store.deck_counts()


def assign_cards(store, kind, player_id, card_ids):
    """Replace the player's whole set of ``kind`` cards in one transaction.

    Card ids are not checked against the catalog. Technologies come back
    untapped, and assigned relics leave the relic deck.
    """
    owner_model = CARD_KINDS[kind][1]
    with store.transaction(f'assign {kind} cards') as session:
        player = store.get_player(player_id)
        rows = []
        for card_id in dict.fromkeys(card_ids):
            row = {'card_id': card_id}
            if owner_model is PlayerTechnology:
                row['tapped'] = False
            rows.append(row)
        store.replace_player_rows(owner_model, player_id, rows)
        if owner_model is PlayerRelicCard and rows:
            session.execute(delete(RelicDeck).where(RelicDeck.card_id.in_([r['card_id'] for r in rows])))
        payload = {'player': store.player_state(player)}
    store.logger.info(f"[assign-{kind}] player={player_id} cards={[r['card_id'] for r in rows]}")
    return payload


def set_technology_tapped(store, player_id, card_id, tapped):
    with store.transaction('update technology tapped status') as session:
        row = PlayerTechnology.query.filter_by(player_id=player_id, card_id=card_id).first()
        if not row:
            raise NotFound('Technology not owned by player')
        row.tapped = tapped
        session.flush()
        return {'player': store.player_state(store.get_player(player_id))}


def update_trade_goods(store, card_id, increment):
    """Add or remove one trade good on a strategy card, never below zero."""
    with store.transaction('update trade goods') as session:
        card = StrategyCard.query.filter_by(id=card_id).first()
        if not card:
            raise NotFound('Strategy card not found')
        count = card.trade_goods or 0
        card.trade_goods = count + 1 if increment else max(0, count - 1)
        session.flush()
        payload = {'strategyCard': card.to_dict()}
    store.logger.info(f"[trade-goods] card={card_id} count={payload['strategyCard']['tradeGoods']}")
    return payload

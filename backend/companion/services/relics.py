from collections import Counter

from sqlalchemy import delete, select

from companion.errors import NotFound, ValidationError
from companion.models import (
    ExplorationCard, PlayerExplorationCard, PlayerRelicCard,
)

FRAGMENTS_PER_RELIC = 3
WILDCARD_TYPE = 'frontier'


def fragments_compatible(types):
    """Three fragments combine when all share a type, or when two share a
    type and the third is a frontier wildcard."""
    if len(types) != FRAGMENTS_PER_RELIC:
        return False
    counts = Counter(types)
    if len(counts) == 1:
        return True
    if len(counts) == 2:
        _, most = counts.most_common(1)[0]
        return most == FRAGMENTS_PER_RELIC - 1 and counts.get(WILDCARD_TYPE) == 1
    return False


def combine_relic_fragments(store, player_id, fragment_ids):
    """Trade three fragments from the player's hand for a random relic.

    The fragments are discarded and the relic drawn in one transaction; an
    empty relic deck raises ``NotFound`` and the fragments stay in hand.
    """
    if len(fragment_ids) != FRAGMENTS_PER_RELIC:
        raise ValidationError('Exactly three relic fragments must be selected')
    if len(set(fragment_ids)) != FRAGMENTS_PER_RELIC:
        raise ValidationError('Relic fragments must be distinct')

    with store.transaction('combine relic fragments') as session:
        player = store.get_player(player_id)
        fragments = session.execute(
            select(ExplorationCard)
            .join(PlayerExplorationCard, PlayerExplorationCard.card_id == ExplorationCard.id)
            .where(
                PlayerExplorationCard.player_id == player_id,
                PlayerExplorationCard.card_id.in_(fragment_ids),
            )
        ).scalars().all()
        if len(fragments) != FRAGMENTS_PER_RELIC:
            raise NotFound('Relic fragment not found in player hand')
        if any(f.subtype != 'relic_fragment' for f in fragments):
            raise ValidationError('Only relic fragments can be combined')
        if not fragments_compatible([f.type for f in fragments]):
            raise ValidationError('Relic fragments must share a type')

        session.execute(
            delete(PlayerExplorationCard).where(
                PlayerExplorationCard.player_id == player_id,
                PlayerExplorationCard.card_id.in_(fragment_ids),
            )
        )
        relic = store.draw_relic()
        if relic is None:
            raise NotFound('Relic deck is empty')
        session.add(PlayerRelicCard(player_id=player_id, card_id=relic.id))
        session.flush()

        payload = {
            'relic': relic.to_dict(),
            'fragmentIds': list(fragment_ids),
            'player': store.player_state(player),
        }
    store.logger.info(f"[combine-relic] player={player_id} fragments={list(fragment_ids)} relic={payload['relic']['id']}")
    return payload

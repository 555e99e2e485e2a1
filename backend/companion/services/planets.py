from sqlalchemy import delete, update

from companion.errors import NotFound, ValidationError
from companion.models import (
    ExplorationCard, Planet, PlanetAttachment, PlayerExplorationCard,
    PlayerPlanet, PlayerTechnology,
)


def list_planets(store):
    with store.transaction('fetch planets'):
        planets = Planet.query.order_by(Planet.id).all()
        attachments = store.attachments_by_planet([p.id for p in planets])
        result = []
        for planet in planets:
            item = planet.to_dict()
            item['attachments'] = attachments[planet.id]
            result.append(item)
        return result


def planet_attachments(store, planet_id):
    with store.transaction('fetch planet attachments'):
        planet = store.get_planet(planet_id)
        return store.planet_state(planet)['attachments']


def assign_planets(store, player_id, planet_ids):
    """Replace the player's whole planet set; every planet starts untapped.

    Planet ids are not checked against the catalog.
    """
    with store.transaction('assign planets'):
        player = store.get_player(player_id)
        rows = [{'planet_id': pid, 'tapped': False} for pid in dict.fromkeys(planet_ids)]
        store.replace_player_rows(PlayerPlanet, player_id, rows)
        payload = {'player': store.player_state(player)}
    store.logger.info(f"[assign-planets] player={player_id} planets={list(dict.fromkeys(planet_ids))}")
    return payload


def set_planet_tapped(store, player_id, planet_id, tapped):
    with store.transaction('update tapped status') as session:
        row = PlayerPlanet.query.filter_by(player_id=player_id, planet_id=planet_id).first()
        if not row:
            raise NotFound('Planet not assigned to player')
        row.tapped = tapped
        session.flush()
        return {'player': store.player_state(store.get_player(player_id))}


def untap_all(store, player_id):
    """Ready every planet and technology the player holds."""
    with store.transaction('untap all') as session:
        player = store.get_player(player_id)
        session.execute(update(PlayerPlanet).where(PlayerPlanet.player_id == player_id).values(tapped=False))
        session.execute(update(PlayerTechnology).where(PlayerTechnology.player_id == player_id).values(tapped=False))
        return {'player': store.player_state(player)}


def explore_planet(store, player_id, planet_id):
    """Draw from the exploration deck matching the planet's trait.

    ``attach`` cards are fixed to the planet; anything else goes to the
    player's hand. An empty deck raises ``NotFound`` and changes nothing.
    """
    with store.transaction('explore planet') as session:
        player = store.get_player(player_id)
        planet = store.get_planet(planet_id)
        if not planet.type:
            raise ValidationError('Planet has no trait to explore')

        card = store.draw_exploration_card(planet.type)
        if card is None:
            raise NotFound(f'No {planet.type} exploration cards left')

        attached = card.subtype == 'attach'
        if attached:
            if not PlanetAttachment.query.filter_by(planet_id=planet.id, card_id=card.id).first():
                session.add(PlanetAttachment(planet_id=planet.id, card_id=card.id))
        else:
            session.add(PlayerExplorationCard(player_id=player.id, card_id=card.id))
        session.flush()

        payload = {
            'card': card.to_dict(),
            'attached': attached,
            'player': store.player_state(player),
            'planet': store.planet_state(planet),
        }
    store.logger.info(
        f"[explore] player={player_id} planet={planet_id} card={payload['card']['id']} attached={attached}"
    )
    return payload


def attach_cards(store, planet_id, card_ids):
    """Fix attach-type exploration cards to a planet; existing pairs are skipped."""
    wanted = list(dict.fromkeys(card_ids))
    with store.transaction('attach cards') as session:
        planet = store.get_planet(planet_id)
        cards = ExplorationCard.query.filter(ExplorationCard.id.in_(wanted)).all() if wanted else []
        if len(cards) != len(wanted):
            raise NotFound('Exploration card not found')
        if any(c.subtype != 'attach' for c in cards):
            raise ValidationError('Only attach cards can be attached to a planet')

        present = {
            a.card_id for a in PlanetAttachment.query.filter_by(planet_id=planet.id).all()
        }
        for card_id in wanted:
            if card_id not in present:
                session.add(PlanetAttachment(planet_id=planet.id, card_id=card_id))
        session.flush()
        return {'planet': store.planet_state(planet)}


def detach_cards(store, planet_id, card_ids):
    with store.transaction('detach cards') as session:
        planet = store.get_planet(planet_id)
        if card_ids:
            session.execute(
                delete(PlanetAttachment).where(
                    PlanetAttachment.planet_id == planet.id,
                    PlanetAttachment.card_id.in_(card_ids),
                )
            )
        return {'planet': store.planet_state(planet)}


def delete_planet(store, planet_id):
    """Administrative removal of a catalog planet and every row pointing at it."""
    with store.transaction('delete planet') as session:
        planet = store.get_planet(planet_id)
        session.execute(delete(PlanetAttachment).where(PlanetAttachment.planet_id == planet.id))
        session.execute(delete(PlayerPlanet).where(PlayerPlanet.planet_id == planet.id))
        session.delete(planet)
    store.logger.info(f"[delete-planet] planet={planet_id}")
    return {'message': f'Planet {planet_id} deleted', 'planetId': planet_id}

"""Load the bundled JSON catalogs into a fresh game."""
import json
import os

from sqlalchemy import delete

from companion.models import (
    CATALOG_TABLES, EXPLORATION_SUBTYPES, EXPLORATION_TYPES, OBJECTIVE_TYPES,
    PLANET_TYPES, TECHNOLOGY_TYPES, ActionCard, ExplorationCard,
    ExplorationDeck, Faction, Objective, Planet, Player, RelicCard, RelicDeck,
    StrategyCard, TechnologyCard,
)

CATALOG_FILES = (
    'planets', 'exploration_cards', 'relic_cards', 'strategy_cards',
    'action_cards', 'technology_cards', 'objectives', 'factions',
)


def load_catalog(data_dir, name):
    with open(os.path.join(data_dir, f'{name}.json'), encoding='utf-8') as fh:
        return json.load(fh)


def load_catalogs(data_dir):
    return {name: load_catalog(data_dir, name) for name in CATALOG_FILES}


def _check_values(catalog, entries, field, allowed, optional=False):
    for entry in entries:
        value = entry.get(field)
        if value is None and optional:
            continue
        if value not in allowed:
            raise ValueError(f"{catalog}: {entry.get('name')!r} has unknown {field} {value!r}")


def validate_catalogs(catalogs):
    """Reject a catalog entry whose type is not one the game understands."""
    _check_values('planets', catalogs['planets'], 'type', PLANET_TYPES, optional=True)
    _check_values('exploration_cards', catalogs['exploration_cards'], 'type', EXPLORATION_TYPES)
    _check_values('exploration_cards', catalogs['exploration_cards'], 'subtype', EXPLORATION_SUBTYPES)
    _check_values('technology_cards', catalogs['technology_cards'], 'type', TECHNOLOGY_TYPES)
    _check_values('objectives', catalogs['objectives'], 'type', OBJECTIVE_TYPES)


def seed_catalogs(store, data_dir, force=False):
    """Reload every catalog and refill both decks.

    Skipped when any player exists unless ``force`` is set, so restarting the
    server mid-game keeps the drawn cards drawn. Returns True when seeded.
    """
    catalogs = load_catalogs(data_dir)
    validate_catalogs(catalogs)

    with store.transaction('seed catalogs') as session:
        if not force and Player.query.first() is not None:
            store.logger.info('[seed] players present, skipping catalog seed')
            return False

        for model in CATALOG_TABLES:
            session.execute(delete(model))

        for entry in catalogs['planets']:
            session.add(Planet(
                id=entry['id'],
                name=entry['name'],
                resources=entry['resources'],
                influence=entry['influence'],
                type=entry.get('type'),
                legendary=entry.get('legendary', False),
                legendary_ability=entry.get('legendaryAbility'),
            ))

        exploration = []
        for entry in catalogs['exploration_cards']:
            # one row per physical copy
            for _ in range(entry.get('count', 1)):
                card = ExplorationCard(
                    name=entry['name'],
                    type=entry['type'],
                    subtype=entry['subtype'],
                    image=entry.get('image'),
                )
                session.add(card)
                exploration.append(card)

        relics = []
        for entry in catalogs['relic_cards']:
            card = RelicCard(name=entry['name'], image=entry.get('image'))
            session.add(card)
            relics.append(card)

        for entry in catalogs['strategy_cards']:
            session.add(StrategyCard(
                id=entry['initiative'],
                name=entry['name'],
                initiative=entry['initiative'],
                image=entry.get('image'),
                trade_goods=0,
            ))

        for entry in catalogs['action_cards']:
            session.add(ActionCard(name=entry['name'], phase=entry.get('phase'), image=entry.get('image')))

        for entry in catalogs['technology_cards']:
            session.add(TechnologyCard(name=entry['name'], type=entry['type'], image=entry.get('image')))

        for entry in catalogs['objectives']:
            session.add(Objective(
                name=entry['name'],
                description=entry['description'],
                type=entry['type'],
                points=entry['points'],
            ))

        for entry in catalogs['factions']:
            session.add(Faction(
                name=entry['name'],
                board_front_image=entry.get('boardFrontImage'),
                board_back_image=entry.get('boardBackImage'),
                reference_card_image=entry.get('referenceCardImage'),
                token_image=entry.get('tokenImage'),
            ))

        session.flush()
        for card in exploration:
            session.add(ExplorationDeck(card_id=card.id))
        for card in relics:
            session.add(RelicDeck(card_id=card.id))

    store.logger.info(
        f"[seed] loaded {len(catalogs['planets'])} planets, {len(exploration)} exploration cards, "
        f"{len(relics)} relics"
    )
    return True

"""Persistent store wrapper.

One ``GameStore`` is built by the app factory and handed to every blueprint
and socket handler. It owns the transaction boundary and the read helpers
that build the serialized player, planet and snapshot payloads.
"""
from contextlib import contextmanager

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from companion.errors import GameError, NotFound, StoreError
from companion.models import (
    ActionCard, ExplorationCard, ExplorationDeck, Objective, Planet,
    PlanetAttachment, Player, PlayerActionCard, PlayerExplorationCard,
    PlayerObjective, PlayerPlanet, PlayerRelicCard, PlayerStrategyCard,
    PlayerTechnology, RelicCard, RelicDeck, StrategyCard, TechnologyCard,
)


class GameStore:
    def __init__(self, database, logger):
        self.db = database
        self.logger = logger

    @property
    def session(self):
        return self.db.session

    @contextmanager
    def transaction(self, action):
        """Run a unit of work; commit on success, roll back on any error.

        Query failures are logged with their cause and re-raised as a
        ``StoreError`` carrying a static message.
        """
        session = self.session
        try:
            yield session
            session.commit()
        except GameError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            self.logger.exception(f"[store] failed to {action}: {exc}")
            raise StoreError(f'Failed to {action}') from exc
        except Exception:
            session.rollback()
            raise

    # ---- lookups ----

    def get_player(self, player_id):
        player = Player.query.filter_by(id=player_id).first()
        if not player:
            raise NotFound('Player not found')
        return player

    def get_planet(self, planet_id):
        planet = Planet.query.filter_by(id=planet_id).first()
        if not planet:
            raise NotFound('Planet not found')
        return planet

    # ---- decks ----

    def draw_exploration_card(self, card_type):
        """Remove one random card of ``card_type`` from the exploration deck.

        Selection and removal are a single DELETE ... RETURNING statement, so
        a deck row can only ever be handed out once. Returns None when the
        deck holds no card of that type.
        """
        pick = (
            select(ExplorationDeck.card_id)
            .join(ExplorationCard, ExplorationCard.id == ExplorationDeck.card_id)
            .where(ExplorationCard.type == card_type)
            .order_by(func.random())
            .limit(1)
            .scalar_subquery()
        )
        stmt = (
            delete(ExplorationDeck)
            .where(ExplorationDeck.card_id == pick)
            .returning(ExplorationDeck.card_id)
        )
        card_id = self.session.execute(stmt).scalar_one_or_none()
        if card_id is None:
            return None
        return ExplorationCard.query.filter_by(id=card_id).first()

    def draw_relic(self):
        """Remove one random relic from the deck, skipping any a player already holds."""
        pick = (
            select(RelicDeck.card_id)
            .where(RelicDeck.card_id.notin_(select(PlayerRelicCard.card_id)))
            .order_by(func.random())
            .limit(1)
            .scalar_subquery()
        )
        stmt = (
            delete(RelicDeck)
            .where(RelicDeck.card_id == pick)
            .returning(RelicDeck.card_id)
        )
        card_id = self.session.execute(stmt).scalar_one_or_none()
        if card_id is None:
            return None
        return RelicCard.query.filter_by(id=card_id).first()

    def deck_counts(self):
        rows = self.session.execute(
            select(ExplorationCard.type, func.count(ExplorationDeck.card_id))
            .join(ExplorationCard, ExplorationCard.id == ExplorationDeck.card_id)
            .group_by(ExplorationCard.type)
        ).all()
        counts = {card_type: count for card_type, count in rows}
        relics = self.session.execute(select(func.count(RelicDeck.card_id))).scalar_one()
        return {'exploration': counts, 'relics': relics}

    # ---- set replacement ----

    def replace_player_rows(self, model, player_id, rows):
        """Delete every ``model`` row owned by the player, then insert ``rows``.

        Must run inside ``transaction`` so both halves commit together.
        """
        self.session.execute(delete(model).where(model.player_id == player_id))
        for row in rows:
            self.session.add(model(player_id=player_id, **row))
        self.session.flush()

    # ---- serialization ----

    def attachments_by_planet(self, planet_ids):
        result = {pid: [] for pid in planet_ids}
        if not planet_ids:
            return result
        rows = self.session.execute(
            select(PlanetAttachment.planet_id, ExplorationCard)
            .join(ExplorationCard, ExplorationCard.id == PlanetAttachment.card_id)
            .where(PlanetAttachment.planet_id.in_(planet_ids))
            .order_by(PlanetAttachment.id)
        ).all()
        for planet_id, card in rows:
            result[planet_id].append(card.to_dict())
        return result

    def planet_state(self, planet):
        data = planet.to_dict()
        data['attachments'] = self.attachments_by_planet([planet.id])[planet.id]
        return data

    def _owned(self, card_model, join_model, player_id, extra=None):
        columns = [card_model] + [getattr(join_model, name) for name in (extra or [])]
        rows = self.session.execute(
            select(*columns)
            .join(join_model, join_model.card_id == card_model.id)
            .where(join_model.player_id == player_id)
            .order_by(card_model.id)
        ).all()
        owned = []
        for row in rows:
            item = row[0].to_dict()
            for name, value in zip(extra or [], row[1:]):
                item[name] = value
            owned.append(item)
        return owned

    def player_state(self, player):
        """Full serialized player entry as it appears in the snapshot."""
        data = player.to_dict()

        planet_rows = self.session.execute(
            select(Planet, PlayerPlanet.tapped)
            .join(PlayerPlanet, PlayerPlanet.planet_id == Planet.id)
            .where(PlayerPlanet.player_id == player.id)
            .order_by(Planet.id)
        ).all()
        attachments = self.attachments_by_planet([planet.id for planet, _ in planet_rows])
        planets = []
        for planet, tapped in planet_rows:
            item = planet.to_dict()
            item['tapped'] = tapped
            item['attachments'] = attachments[planet.id]
            planets.append(item)
        data['planets'] = planets

        data['explorationCards'] = self._owned(ExplorationCard, PlayerExplorationCard, player.id)
        data['relicCards'] = self._owned(RelicCard, PlayerRelicCard, player.id)
        data['strategyCards'] = self._owned(StrategyCard, PlayerStrategyCard, player.id)
        data['actionCards'] = self._owned(ActionCard, PlayerActionCard, player.id)
        data['technologies'] = self._owned(TechnologyCard, PlayerTechnology, player.id, extra=['tapped'])

        objective_rows = self.session.execute(
            select(Objective, PlayerObjective.completed)
            .join(PlayerObjective, PlayerObjective.objective_id == Objective.id)
            .where(PlayerObjective.player_id == player.id)
            .order_by(Objective.id)
        ).all()
        objectives = []
        for objective, completed in objective_rows:
            item = objective.to_dict()
            item['completed'] = completed
            objectives.append(item)
        data['objectives'] = objectives
        return data

    def snapshot(self):
        players = Player.query.order_by(Player.name).all()
        objectives = Objective.query.order_by(Objective.id).all()
        return {
            'players': [self.player_state(p) for p in players],
            'objectives': [o.to_dict() for o in objectives],
            'victoryPoints': {p.id: p.victory_points for p in players},
        }

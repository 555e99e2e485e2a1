from companion import db
import uuid

PLANET_TYPES = ('cultural', 'hazardous', 'industrial')
EXPLORATION_TYPES = PLANET_TYPES + ('frontier',)
EXPLORATION_SUBTYPES = ('attach', 'action', 'relic_fragment', 'resolve')
TECHNOLOGY_TYPES = ('biotic', 'propulsion', 'cybernetic', 'warfare', 'unit_upgrade')
OBJECTIVE_TYPES = ('public', 'secret')


def generate_player_id():
    return uuid.uuid4().hex


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.String(32), primary_key=True, default=generate_player_id)
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    resources = db.Column(db.Integer, default=0, nullable=False)
    influence = db.Column(db.Integer, default=0, nullable=False)
    commodities = db.Column(db.Integer, default=0, nullable=False)
    trade_goods = db.Column(db.Integer, default=0, nullable=False)
    victory_points = db.Column(db.Integer, default=0, nullable=False)
    # Faction name, matched by string only
    faction = db.Column(db.String(64), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'resources': self.resources,
            'influence': self.influence,
            'commodities': self.commodities,
            'tradeGoods': self.trade_goods,
            'victoryPoints': self.victory_points,
            'faction': self.faction,
        }


class Planet(db.Model):
    __tablename__ = 'planet'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    resources = db.Column(db.Integer, default=0, nullable=False)
    influence = db.Column(db.Integer, default=0, nullable=False)
    type = db.Column(db.String(16), nullable=True)  # cultural, hazardous, industrial
    legendary = db.Column(db.Boolean, default=False, nullable=False)
    legendary_ability = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'resources': self.resources,
            'influence': self.influence,
            'type': self.type,
            'legendary': self.legendary,
            'legendaryAbility': self.legendary_ability,
        }


class PlayerPlanet(db.Model):
    __tablename__ = 'player_planet'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    planet_id = db.Column(db.Integer, db.ForeignKey('planet.id'), primary_key=True)
    tapped = db.Column(db.Boolean, default=False, nullable=False)


class ExplorationCard(db.Model):
    __tablename__ = 'exploration_card'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    type = db.Column(db.String(16), nullable=False)  # cultural, hazardous, industrial, frontier
    subtype = db.Column(db.String(16), nullable=False)  # attach, action, relic_fragment, resolve
    image = db.Column(db.String(256), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'subtype': self.subtype,
            'image': self.image,
        }


class ExplorationDeck(db.Model):
    __tablename__ = 'exploration_deck'
    card_id = db.Column(db.Integer, db.ForeignKey('exploration_card.id'), primary_key=True)


class PlayerExplorationCard(db.Model):
    __tablename__ = 'player_exploration_card'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    card_id = db.Column(db.Integer, db.ForeignKey('exploration_card.id'), primary_key=True)


class PlanetAttachment(db.Model):
    __tablename__ = 'planet_attachment'
    __table_args__ = (db.UniqueConstraint('planet_id', 'card_id', name='uq_planet_attachment'),)
    id = db.Column(db.Integer, primary_key=True)
    planet_id = db.Column(db.Integer, db.ForeignKey('planet.id'), nullable=False, index=True)
    card_id = db.Column(db.Integer, db.ForeignKey('exploration_card.id'), nullable=False)


class RelicCard(db.Model):
    __tablename__ = 'relic_card'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    image = db.Column(db.String(256), nullable=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'image': self.image}


class RelicDeck(db.Model):
    __tablename__ = 'relic_deck'
    card_id = db.Column(db.Integer, db.ForeignKey('relic_card.id'), primary_key=True)


class PlayerRelicCard(db.Model):
    __tablename__ = 'player_relic_card'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    card_id = db.Column(db.Integer, db.ForeignKey('relic_card.id'), primary_key=True)


class StrategyCard(db.Model):
    __tablename__ = 'strategy_card'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    initiative = db.Column(db.Integer, nullable=False)
    image = db.Column(db.String(256), nullable=True)
    trade_goods = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'initiative': self.initiative,
            'image': self.image,
            'tradeGoods': self.trade_goods,
        }


class PlayerStrategyCard(db.Model):
    __tablename__ = 'player_strategy_card'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    card_id = db.Column(db.Integer, db.ForeignKey('strategy_card.id'), primary_key=True)


class ActionCard(db.Model):
    __tablename__ = 'action_card'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    phase = db.Column(db.String(32), nullable=True)
    image = db.Column(db.String(256), nullable=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'phase': self.phase, 'image': self.image}


class PlayerActionCard(db.Model):
    __tablename__ = 'player_action_card'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    card_id = db.Column(db.Integer, db.ForeignKey('action_card.id'), primary_key=True)


class TechnologyCard(db.Model):
    __tablename__ = 'technology_card'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    type = db.Column(db.String(16), nullable=False)  # biotic, propulsion, cybernetic, warfare, unit_upgrade
    image = db.Column(db.String(256), nullable=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'type': self.type, 'image': self.image}


class PlayerTechnology(db.Model):
    __tablename__ = 'player_technology'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    card_id = db.Column(db.Integer, db.ForeignKey('technology_card.id'), primary_key=True)
    tapped = db.Column(db.Boolean, default=False, nullable=False)


class Objective(db.Model):
    __tablename__ = 'objective'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(16), nullable=False)  # public, secret
    points = db.Column(db.Integer, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'type': self.type,
            'points': self.points,
        }


class PlayerObjective(db.Model):
    __tablename__ = 'player_objective'
    player_id = db.Column(db.String(32), db.ForeignKey('player.id'), primary_key=True)
    objective_id = db.Column(db.Integer, db.ForeignKey('objective.id'), primary_key=True)
    completed = db.Column(db.Boolean, default=False, nullable=False)


class Faction(db.Model):
    __tablename__ = 'faction'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    board_front_image = db.Column(db.String(256), nullable=True)
    board_back_image = db.Column(db.String(256), nullable=True)
    reference_card_image = db.Column(db.String(256), nullable=True)
    token_image = db.Column(db.String(256), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'boardFrontImage': self.board_front_image,
            'boardBackImage': self.board_back_image,
            'referenceCardImage': self.reference_card_image,
            'tokenImage': self.token_image,
        }


# Catalog and deck tables cleared by a reseed, children before parents
CATALOG_TABLES = (
    PlanetAttachment, PlayerPlanet, PlayerExplorationCard, PlayerRelicCard,
    PlayerStrategyCard, PlayerActionCard, PlayerTechnology, PlayerObjective,
    ExplorationDeck, RelicDeck,
    Planet, ExplorationCard, RelicCard, StrategyCard, ActionCard,
    TechnologyCard, Objective, Faction,
)

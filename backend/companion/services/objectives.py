from sqlalchemy import select

from companion.errors import NotFound, ValidationError
from companion.models import Objective, PlayerObjective, OBJECTIVE_TYPES


def list_objectives(store, objective_type=None):
    if objective_type is not None and objective_type not in OBJECTIVE_TYPES:
        raise ValidationError("Objective type must be 'public' or 'secret'")
    with store.transaction('fetch objectives'):
        query = Objective.query
        if objective_type:
            query = query.filter_by(type=objective_type)
        return [o.to_dict() for o in query.order_by(Objective.id).all()]


def assign_objectives(store, player_id, objective_type, objective_ids):
    """Replace the player's objectives of one type.

    Objectives that stay selected keep their completed flag; objectives of
    the other type are untouched.
    """
    if objective_type not in OBJECTIVE_TYPES:
        raise ValidationError("Objective type must be 'public' or 'secret'")
    wanted = list(dict.fromkeys(objective_ids))

    with store.transaction('assign objectives') as session:
        player = store.get_player(player_id)
        objectives = Objective.query.filter(Objective.id.in_(wanted)).all() if wanted else []
        if len(objectives) != len(wanted):
            raise NotFound('Objective not found')
        if any(o.type != objective_type for o in objectives):
            raise ValidationError(f'All objectives must be {objective_type}')

        existing = {
            row.objective_id: row
            for row in session.execute(
                select(PlayerObjective)
                .join(Objective, Objective.id == PlayerObjective.objective_id)
                .where(PlayerObjective.player_id == player_id, Objective.type == objective_type)
            ).scalars()
        }
        for objective_id, row in existing.items():
            if objective_id not in wanted:
                session.delete(row)
        for objective_id in wanted:
            if objective_id not in existing:
                session.add(PlayerObjective(player_id=player_id, objective_id=objective_id, completed=False))
        session.flush()
        return {'player': store.player_state(player)}


def set_objective_completed(store, player_id, objective_id, completed):
    """Flag an objective as scored. Victory points are tracked separately."""
    with store.transaction('update objective') as session:
        row = PlayerObjective.query.filter_by(player_id=player_id, objective_id=objective_id).first()
        if not row:
            raise NotFound('Objective not assigned to player')
        row.completed = completed
        session.flush()
        return {'player': store.player_state(store.get_player(player_id))}

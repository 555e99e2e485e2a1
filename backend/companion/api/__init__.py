from flask import jsonify


def publish(broadcaster, event, payload, status=200):
    """Broadcast ``payload`` and return the same payload as the response."""
    broadcaster.publish(event, payload)
    return jsonify(payload), status


def register_api(flask_app, store, broadcaster):
    from companion.api import cards, objectives, planets, players, state

    for module in (state, players, planets, cards, objectives):
        flask_app.register_blueprint(module.create_blueprint(store, broadcaster), url_prefix='/api')

"""Game domain services: players, planets, cards and objectives.

Each operation takes the injected ``GameStore``, runs inside one store
transaction and returns the authoritative new state of every entity it
touched. HTTP routes return that payload and broadcast it unchanged.
"""

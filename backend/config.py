import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'db.sqlite')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Comma-separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Load bundled catalogs at startup unless players already exist
    SEED_ON_STARTUP = os.environ.get('SEED_ON_STARTUP', '1') not in ('0', 'false', 'False')
    SEED_DATA_DIR = os.environ.get('SEED_DATA_DIR') or os.path.join(BASE_DIR, 'companion', 'data')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    PORT = int(os.environ.get('PORT', '5000'))

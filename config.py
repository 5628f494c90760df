import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your_secret_key_here'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///ledger.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # JSON API only, forms are fed from request bodies
    WTF_CSRF_ENABLED = False
    BABEL_DEFAULT_LOCALE = os.environ.get('LEDGER_LOCALE') or 'en'
    BABEL_DEFAULT_TIMEZONE = os.environ.get('LEDGER_TIMEZONE') or 'UTC'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_FILE = os.environ.get('LOG_FILE')
    RECENT_TRANSACTIONS_LIMIT = 10
    PORT = int(os.environ.get('PORT') or 3000)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_FILE = None

"""Application settings read from the environment.

SHOP_DATABASE_PATH  JSON document backing the record store
                    (default: the bundled data/database.json)
SHOP_LOG_DIR        directory for daily rotating log files (default: console only)
SHOP_SECRET_KEY     Flask secret key, used for flash messages
PORT                port for the development server (default 5000)
"""
import os

HERE = os.path.abspath(os.path.dirname(__file__))
DEFAULT_DATABASE_PATH = os.path.join(HERE, 'data', 'database.json')


def load_config():
    """Build the Flask config mapping from environment variables"""
    return {
        'DATABASE_PATH': os.getenv('SHOP_DATABASE_PATH', DEFAULT_DATABASE_PATH),
        'LOG_DIR': os.getenv('SHOP_LOG_DIR') or None,
        'SECRET_KEY': os.getenv('SHOP_SECRET_KEY', 'cloudburst-dev-key'),
        'PORT': int(os.getenv('PORT', 5000)),
    }

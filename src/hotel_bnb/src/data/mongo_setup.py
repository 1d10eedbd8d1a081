import logging
import os

import mongoengine # Import the MongoEngine library used to define models and manage MongoDB connections.

logger = logging.getLogger(__name__)

DB_NAME = os.environ.get('HOTEL_BNB_DB', 'hotel_bnb')
MONGO_HOST = os.environ.get('HOTEL_BNB_MONGO_HOST', 'localhost')
MONGO_PORT = int(os.environ.get('HOTEL_BNB_MONGO_PORT', '27017'))

"""
Initialize MongoEngine and register the application's default connection.

- Registers a connection alias named 'core' that points to the configured
    database (HOTEL_BNB_DB, default 'hotel_bnb').
- Call this once during application startup before using models that
    specify `meta = {'db_alias': 'core'}` so they bind to this connection.
- Extra keyword arguments go straight to mongoengine.register_connection();
    tests pass mongo_client_class=mongomock.MongoClient here.
"""
def global_init(db_name: str = None, **kwargs):
    name = db_name or DB_NAME
    kwargs.setdefault('host', MONGO_HOST)
    kwargs.setdefault('port', MONGO_PORT)

    mongoengine.register_connection(alias='core', name=name, **kwargs)
    logger.info("Registered connection 'core' to database %s on %s", name, kwargs['host'])


def global_close():
    mongoengine.disconnect(alias='core')

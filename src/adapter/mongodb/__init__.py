"""MongoDB adapters."""

USERS_COLLECTION_NAME = 'users'

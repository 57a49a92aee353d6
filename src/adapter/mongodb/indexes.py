"""MongoDB index management.

Uniqueness of user id and email is enforced here, not in application code.
"""

from logging import getLogger

from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def create_index_safe(collection, keys: list, name: str, **kwargs) -> None:
    """Create an index, replacing an existing one whose name or key spec conflicts."""
    try:
        collection.create_index(keys, name=name, **kwargs)
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise
        _replace_conflicting(collection, keys, name, **kwargs)


def _replace_conflicting(collection, keys: list, name: str, **kwargs) -> None:
    wanted = dict(keys)
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted
        # same name with other keys, other name with same keys, or same both with other options
        if same_name or same_keys:
            logger.warning("Dropping conflicting index", extra={"index": idx_name})
            collection.drop_index(idx_name)
            collection.create_index(keys, name=name, **kwargs)
            return
    raise PyMongoError(f"Could not resolve index conflict for {name}")


def ensure_all_indexes(db: Database) -> bool:
    """Ensure indexes for every collection. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()

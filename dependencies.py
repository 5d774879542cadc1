"""
Record lookups by internal id, public id or bare hash, for web handlers.

    users = {1: {"name": "Ada"}}

    @app.get("/users/{user_id}")
    async def show_user(user=Depends(public_id_dependency(registry, "User", users, "user_id"))):
        return user

The store is anything with a ``get(key)`` method returning None on a miss:
a dict, a cache client, or a thin wrapper around a database session.
"""
from typing import Any, Callable, Optional, Protocol

from fastapi import HTTPException, Request, status

from core_logic import RecordNotFound, get_logger
from registry import EntityRef, Registry

logger = get_logger(__name__)


class RecordStore(Protocol):
    def get(self, key: Any) -> Optional[Any]:
        ...


class ResourceNotFoundException(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def find_by_any_id(store: RecordStore, registry: Registry, entity_type: EntityRef, value: Any) -> Optional[Any]:
    """Find a record by internal id, public id (with prefix) or encoded hash (without prefix)."""
    key = registry.lookup_any(entity_type, value)
    if key is None:
        return None
    return store.get(key)


def find_by_any_id_or_raise(store: RecordStore, registry: Registry, entity_type: EntityRef, value: Any) -> Any:
    record = find_by_any_id(store, registry, entity_type, value)
    if record is None:
        raise RecordNotFound(registry.get(entity_type).name, str(value))
    return record


def find_by_public_id(store: RecordStore, registry: Registry, entity_type: EntityRef, value: str) -> Optional[Any]:
    """Find a record by its full public id only."""
    key = registry.lookup_public_id(entity_type, value)
    if key is None:
        return None
    return store.get(key)


def public_id_dependency(registry: Registry, entity_type: EntityRef, store: RecordStore,
                         param: str = "id") -> Callable[[Request], Any]:
    """
    Builds a FastAPI dependency that loads the record named by the ``param``
    path parameter, accepting any identifier form, or answers 404.
    """
    entity_name = registry.get(entity_type).name

    def dependency(request: Request) -> Any:
        value = request.path_params.get(param)
        try:
            return find_by_any_id_or_raise(store, registry, entity_name, value)
        except RecordNotFound as e:
            logger.info(f"Lookup miss: {e}")
            raise ResourceNotFoundException(f"{entity_name} not found") from e

    return dependency

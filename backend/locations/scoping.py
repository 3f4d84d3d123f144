"""
Store scope resolution for authenticated callers.

Two questions are answered here and nowhere else:

* may caller X act on store Y (point authorization, ``hierarchy_ids``),
* which stores restrict a listing for caller X (``listing_scope``).

Point authorization excludes sibling branches: a manager of a
branch may act on its own store and its head store only. Listing scope is
broader and also includes the direct branches of the manager's store.
"""
import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from backend.core.exceptions import Forbidden, NotFound
from .hierarchy import branch_ids, hierarchy_ids
from .models import Store

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'admin'
ROLE_MANAGER = 'manager'


@dataclass(frozen=True)
class Caller:
    """Identity of the current request: role plus assigned store, if any."""
    role: str
    store_id: Optional[int] = None
    user_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user) -> 'Caller':
        return cls(role=user.role, store_id=user.store_id, user_id=user.pk)


@dataclass(frozen=True)
class ListingScope:
    """Store ids a listing is restricted to; ``None`` means unrestricted."""
    store_ids: Optional[FrozenSet[int]] = None

    @property
    def unrestricted(self) -> bool:
        return self.store_ids is None

    def apply(self, queryset, field: str = 'store_id'):
        if self.store_ids is None:
            return queryset
        return queryset.filter(**{f'{field}__in': self.store_ids})

    def __contains__(self, store_id):
        return self.store_ids is None or store_id in self.store_ids


def _manager_store(caller: Caller) -> Store:
    if caller.store_id is None:
        logger.warning(f"Manager {caller.user_id} has no store assigned")
        raise Forbidden('Manager has no store assigned.')
    try:
        return Store.objects.get(pk=caller.store_id)
    except Store.DoesNotExist:
        logger.warning(f"Manager {caller.user_id} is bound to missing store {caller.store_id}")
        raise Forbidden('Manager has no store assigned.')


def authorize_store_action(caller: Caller, target_store_id, require_exists: bool = False) -> None:
    """
    Allow or deny ``caller`` acting on store ``target_store_id``.

    Raises ``Forbidden`` when the target is outside the manager's store and
    head store, or ``NotFound`` when ``require_exists`` is set and the target
    store does not exist.
    """
    if caller.is_admin:
        return

    own_store = _manager_store(caller)
    if target_store_id in hierarchy_ids(own_store):
        return

    if require_exists and not Store.objects.filter(pk=target_store_id).exists():
        raise NotFound(f'Store {target_store_id} not found.')

    logger.warning(f"Manager {caller.user_id} (store {own_store.pk}) denied access to store {target_store_id}")
    raise Forbidden()


def authorize_nested_resource(caller: Caller, owning_store_id) -> None:
    """Authorize an action on a record (vehicle, photo) owned by a store."""
    authorize_store_action(caller, owning_store_id)


def listing_scope(caller: Caller) -> ListingScope:
    if caller.is_admin:
        return ListingScope()

    own_store = _manager_store(caller)
    ids = hierarchy_ids(own_store) | branch_ids(own_store.pk)
    return ListingScope(frozenset(ids))

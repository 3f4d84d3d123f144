"""
Two-level store hierarchy.

A store is either a head/standalone store (no parent) or a branch whose
parent is a head store. These checks run before every store mutation and
lock the parent row they read, so callers must hold a transaction around
check and write.
"""
from backend.core.exceptions import Conflict, NotFound
from .models import Store


class ParentNotFound(NotFound):
    default_detail = 'Parent store not found.'
    default_code = 'parent_not_found'


class ParentIsBranch(Conflict):
    default_detail = 'The parent store is itself a branch; branches cannot have branches.'
    default_code = 'parent_is_branch'


class HasBranches(Conflict):
    default_detail = 'A store with branches cannot become a branch.'
    default_code = 'has_branches'


class SelfParent(Conflict):
    default_detail = 'A store cannot be its own parent.'
    default_code = 'self_parent'


def _load_parent(parent_id):
    try:
        return Store.objects.select_for_update().get(pk=parent_id)
    except Store.DoesNotExist:
        raise ParentNotFound(f'Parent store {parent_id} not found.')


def validate_create(candidate_parent_id):
    """A new store may only hang under a store that has no parent."""
    if candidate_parent_id is None:
        return
    parent = _load_parent(candidate_parent_id)
    if parent.is_branch:
        raise ParentIsBranch()


def validate_reparent(store, new_parent_id):
    """
    Check that ``store`` may take ``new_parent_id`` as its parent.

    Clearing the parent is always allowed. Otherwise the new parent must
    exist, must not be ``store`` itself, must not be a branch, and ``store``
    must not have branches of its own.
    """
    if new_parent_id is None:
        return
    if new_parent_id == store.pk:
        raise SelfParent()
    parent = _load_parent(new_parent_id)
    if parent.is_branch:
        raise ParentIsBranch()
    if store.branches.exists():
        raise HasBranches()


def hierarchy_ids(store):
    """The store itself plus its head store, if it is a branch."""
    ids = {store.pk}
    if store.is_branch:
        ids.add(store.parent_id)
    return ids


def branch_ids(store_id):
    return set(Store.objects.filter(parent_id=store_id).values_list('id', flat=True))


def blocking_counts(store):
    """Live (vehicles, branches) referencing ``store``."""
    return store.vehicles.count(), store.branches.count()


def deletable(store):
    vehicles, branches = blocking_counts(store)
    return vehicles == 0 and branches == 0

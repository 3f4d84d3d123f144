from django.db import models

from backend.core.models import SoftDeleteModel


class Store(SoftDeleteModel):
    """
    Dealership store.

    A store with a parent is a branch; the parent is always a head store
    (no parent of its own), so the hierarchy is at most two levels deep.
    """
    name = models.CharField(max_length=200)
    cnpj = models.CharField(max_length=20, unique=True)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    parent = models.ForeignKey(
        'self', on_delete=models.PROTECT, null=True, blank=True, related_name='branches'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def is_branch(self):
        return self.parent_id is not None

    class Meta:
        db_table = 'stores'
        ordering = ['name']

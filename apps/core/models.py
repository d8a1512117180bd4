# apps/core/models.py
import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _


class CoreBaseModel(models.Model):
    """
    Base model shared by every app:
    - UUID primary key
    - Created/updated timestamps
    """

    # UUID Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Timestamp fields
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.__class__.__name__} {self.id}"


class School(CoreBaseModel):
    """
    A school on the platform. Every academic record is scoped to one.
    """
    name = models.CharField(_('school name'), max_length=200, unique=True)
    code = models.SlugField(_('school code'), max_length=50, unique=True)
    is_active = models.BooleanField(_('is active'), default=True)

    class Meta:
        verbose_name = _('School')
        verbose_name_plural = _('Schools')
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"

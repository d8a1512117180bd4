# apps/core/admin.py

from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from .models import School


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    """
    Admin interface for School model.
    """
    list_display = ('name', 'code', 'is_active', 'created_at')
    list_filter = ('is_active', 'created_at')
    search_fields = ('name', 'code')
    prepopulated_fields = {'code': ('name',)}
    readonly_fields = ('created_at', 'updated_at')

    fieldsets = (
        (_('School Details'), {
            'fields': ('name', 'code', 'is_active')
        }),
        (_('System Metadata'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

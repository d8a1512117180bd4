# apps/academics/admin.py

from django.contrib import admin
from django.utils.translation import gettext_lazy as _
from .models import (
    AcademicYear, AcademicPeriod, Subject, SchoolClass, ClassSubject, Student
)


class AcademicPeriodInline(admin.TabularInline):
    model = AcademicPeriod
    extra = 1
    fields = ('name', 'start_date', 'end_date')


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    """
    Admin interface for AcademicYear model.
    """
    list_display = ('name', 'school', 'start_date', 'end_date', 'is_current')
    list_filter = ('school', 'is_current')
    search_fields = ('name',)
    readonly_fields = ('created_at', 'updated_at')
    inlines = [AcademicPeriodInline]


@admin.register(AcademicPeriod)
class AcademicPeriodAdmin(admin.ModelAdmin):
    list_display = ('name', 'academic_year', 'start_date', 'end_date')
    list_filter = ('academic_year__school', 'academic_year')
    search_fields = ('name', 'academic_year__name')


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    """
    Admin interface for Subject model.
    """
    list_display = ('name', 'code', 'school')
    list_filter = ('school',)
    search_fields = ('name', 'code')


class ClassSubjectInline(admin.TabularInline):
    model = ClassSubject
    extra = 1
    fields = ('subject', 'teacher')
    autocomplete_fields = ('subject',)


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ('name', 'school', 'academic_year', 'student_count')
    list_filter = ('school', 'academic_year')
    search_fields = ('name',)
    inlines = [ClassSubjectInline]

    def student_count(self, obj):
        return obj.students.count()
    student_count.short_description = _('Students')


@admin.register(ClassSubject)
class ClassSubjectAdmin(admin.ModelAdmin):
    list_display = ('school_class', 'subject', 'teacher')
    list_filter = ('school_class__school', 'school_class')
    search_fields = ('subject__name', 'school_class__name', 'teacher__email')
    raw_id_fields = ('teacher',)


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('student_id', 'user', 'school', 'school_class')
    list_filter = ('school', 'school_class')
    search_fields = ('student_id', 'user__email', 'user__first_name', 'user__last_name')
    raw_id_fields = ('user',)
    list_select_related = ('user', 'school', 'school_class')

# apps/academics/models.py

from django.db import models
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.core.models import CoreBaseModel


class AcademicYear(CoreBaseModel):
    """
    Model for managing academic years. At most one per school is current.
    """
    school = models.ForeignKey(
        'core.School',
        on_delete=models.CASCADE,
        related_name='academic_years',
        verbose_name=_('school')
    )
    name = models.CharField(_('academic year name'), max_length=100)
    start_date = models.DateField(_('start date'))
    end_date = models.DateField(_('end date'))
    is_current = models.BooleanField(_('is current year'), default=False)

    class Meta:
        verbose_name = _('Academic Year')
        verbose_name_plural = _('Academic Years')
        ordering = ['-start_date']
        unique_together = ['school', 'name']

    def __str__(self):
        return f"{self.name} ({self.school.code})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError(_('End date must be after start date.'))

    def save(self, *args, **kwargs):
        # Only one current year per school
        if self.is_current:
            AcademicYear.objects.filter(
                school_id=self.school_id, is_current=True
            ).exclude(pk=self.pk).update(is_current=False)
        super().save(*args, **kwargs)


class AcademicPeriod(CoreBaseModel):
    """
    A term, semester or quarter inside an academic year. Assignments and
    exam results are scoped to one period.
    """
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.CASCADE,
        related_name='periods',
        verbose_name=_('academic year')
    )
    name = models.CharField(_('period name'), max_length=100)
    start_date = models.DateField(_('start date'))
    end_date = models.DateField(_('end date'))

    class Meta:
        verbose_name = _('Academic Period')
        verbose_name_plural = _('Academic Periods')
        ordering = ['academic_year', 'start_date']
        unique_together = ['academic_year', 'name']

    def __str__(self):
        return f"{self.name} - {self.academic_year.name}"

    def clean(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError(_('End date must be after start date.'))

    def covers(self, day):
        return self.start_date <= day <= self.end_date


class Subject(CoreBaseModel):
    school = models.ForeignKey(
        'core.School',
        on_delete=models.CASCADE,
        related_name='subjects',
        verbose_name=_('school')
    )
    name = models.CharField(_('subject name'), max_length=100)
    code = models.CharField(_('subject code'), max_length=20)

    class Meta:
        verbose_name = _('Subject')
        verbose_name_plural = _('Subjects')
        ordering = ['name']
        unique_together = ['school', 'code']

    def __str__(self):
        return f"{self.name} ({self.code})"


class SchoolClass(CoreBaseModel):
    """
    A class (form/grade section) for one academic year.
    """
    school = models.ForeignKey(
        'core.School',
        on_delete=models.CASCADE,
        related_name='classes',
        verbose_name=_('school')
    )
    academic_year = models.ForeignKey(
        AcademicYear,
        on_delete=models.CASCADE,
        related_name='classes',
        verbose_name=_('academic year')
    )
    name = models.CharField(_('class name'), max_length=100)
    subjects = models.ManyToManyField(
        Subject,
        through='ClassSubject',
        related_name='classes',
        verbose_name=_('subjects'),
        blank=True
    )

    class Meta:
        verbose_name = _('Class')
        verbose_name_plural = _('Classes')
        ordering = ['name']
        unique_together = ['academic_year', 'name']

    def __str__(self):
        return self.name

    @property
    def student_count(self):
        return self.students.count()


class ClassSubject(CoreBaseModel):
    """
    A subject taught in a class, with the teacher responsible for it.
    """
    school_class = models.ForeignKey(
        SchoolClass,
        on_delete=models.CASCADE,
        related_name='class_subjects',
        verbose_name=_('class')
    )
    subject = models.ForeignKey(
        Subject,
        on_delete=models.CASCADE,
        related_name='class_subjects',
        verbose_name=_('subject')
    )
    teacher = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='taught_class_subjects',
        limit_choices_to={'role': 'TEACHER'},
        verbose_name=_('teacher')
    )

    class Meta:
        verbose_name = _('Class Subject')
        verbose_name_plural = _('Class Subjects')
        ordering = ['school_class', 'subject']
        unique_together = ['school_class', 'subject']

    def __str__(self):
        return f"{self.school_class} - {self.subject.name}"


class Student(CoreBaseModel):
    """
    Student profile extending the core User model
    """
    user = models.OneToOneField(
        'users.User',
        on_delete=models.CASCADE,
        related_name='student_profile',
        verbose_name=_('user account')
    )
    school = models.ForeignKey(
        'core.School',
        on_delete=models.CASCADE,
        related_name='students',
        verbose_name=_('school')
    )
    school_class = models.ForeignKey(
        SchoolClass,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
        verbose_name=_('current class')
    )
    student_id = models.CharField(_('student ID'), max_length=30, db_index=True)

    class Meta:
        verbose_name = _('Student')
        verbose_name_plural = _('Students')
        ordering = ['student_id']
        unique_together = ['school', 'student_id']

    def __str__(self):
        return f"{self.user.full_name or self.user.email} ({self.student_id})"

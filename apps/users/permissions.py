# apps/users/permissions.py
"""
Caller checks run at the start of every assessment operation.
"""
from apps.core.exceptions import AccessDenied, NotAuthenticated, NotFound


def verify_teacher_access(user):
    """Return ``user`` if it is an authenticated teacher, else raise."""
    if user is None or not user.is_authenticated:
        raise NotAuthenticated()
    if not user.is_teacher:
        raise AccessDenied()
    return user


def verify_student_access(user):
    """Return the student profile of an authenticated student, else raise."""
    if user is None or not user.is_authenticated:
        raise NotAuthenticated()
    if not user.is_student:
        raise AccessDenied()

    from apps.academics.models import Student

    try:
        return Student.objects.select_related('school_class').get(user=user)
    except Student.DoesNotExist:
        raise NotFound("Student profile not found")

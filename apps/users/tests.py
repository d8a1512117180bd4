# apps/users/tests.py

from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from apps.academics.models import Student
from apps.core.exceptions import AccessDenied, NotAuthenticated, NotFound
from apps.core.models import School

from .models import User
from .permissions import verify_student_access, verify_teacher_access


class CallerChecksTestCase(TestCase):
    """Role checks run before every assessment operation"""

    def setUp(self):
        self.school = School.objects.create(name='Greenfield Academy', code='greenfield')
        self.teacher = User.objects.create_user(
            email='teacher@example.com', password='testpass123',
            role=User.Role.TEACHER, school=self.school
        )
        self.student_user = User.objects.create_user(
            email='student@example.com', password='testpass123',
            role=User.Role.STUDENT, school=self.school
        )

    def test_teacher_access(self):
        self.assertEqual(verify_teacher_access(self.teacher), self.teacher)
        with self.assertRaises(AccessDenied):
            verify_teacher_access(self.student_user)
        with self.assertRaises(NotAuthenticated):
            verify_teacher_access(AnonymousUser())

    def test_student_access_returns_profile(self):
        student = Student.objects.create(user=self.student_user, school=self.school, student_id='S001')
        self.assertEqual(verify_student_access(self.student_user), student)

    def test_student_without_profile(self):
        with self.assertRaisesMessage(NotFound, 'Student profile not found'):
            verify_student_access(self.student_user)
        with self.assertRaises(AccessDenied):
            verify_student_access(self.teacher)

    def test_email_is_the_login(self):
        self.assertEqual(User.USERNAME_FIELD, 'email')
        self.assertTrue(self.teacher.check_password('testpass123'))
        self.assertTrue(self.teacher.is_teacher)
        self.assertFalse(self.teacher.is_student)
        self.assertTrue(self.student_user.is_student)

# apps/academics/tests.py

from datetime import date

from django.test import TestCase

from apps.core.models import School

from .models import AcademicPeriod, AcademicYear
from .services import NoAcademicPeriod, resolve_current_period


class ResolveCurrentPeriodTestCase(TestCase):
    """Picking the period new assignments belong to"""

    def setUp(self):
        self.school = School.objects.create(name='Greenfield Academy', code='greenfield')
        self.year = AcademicYear.objects.create(
            school=self.school,
            name='2025/2026',
            start_date=date(2025, 9, 1),
            end_date=date(2026, 7, 31),
            is_current=True
        )
        self.first_term = AcademicPeriod.objects.create(
            academic_year=self.year, name='First Term',
            start_date=date(2025, 9, 1), end_date=date(2025, 12, 15)
        )
        self.second_term = AcademicPeriod.objects.create(
            academic_year=self.year, name='Second Term',
            start_date=date(2026, 1, 5), end_date=date(2026, 4, 2)
        )

    def test_covering_period_wins(self):
        self.assertEqual(resolve_current_period(self.school, today=date(2025, 10, 1)), self.first_term)
        self.assertEqual(resolve_current_period(self.school, today=date(2026, 2, 1)), self.second_term)

    def test_falls_back_to_latest_period(self):
        # Christmas break is covered by no period
        self.assertEqual(resolve_current_period(self.school, today=date(2025, 12, 25)), self.second_term)

    def test_ignores_other_years(self):
        old_year = AcademicYear.objects.create(
            school=self.school, name='2024/2025',
            start_date=date(2024, 9, 1), end_date=date(2025, 7, 31)
        )
        AcademicPeriod.objects.create(
            academic_year=old_year, name='Third Term',
            start_date=date(2025, 4, 20), end_date=date(2025, 12, 31)
        )
        self.assertEqual(resolve_current_period(self.school, today=date(2025, 12, 20)), self.second_term)

    def test_no_periods_raises(self):
        AcademicPeriod.objects.all().delete()
        with self.assertRaisesMessage(NoAcademicPeriod, 'No active academic period found'):
            resolve_current_period(self.school, today=date(2025, 10, 1))

    def test_only_one_current_year(self):
        next_year = AcademicYear.objects.create(
            school=self.school, name='2026/2027',
            start_date=date(2026, 9, 1), end_date=date(2027, 7, 31), is_current=True
        )
        self.year.refresh_from_db()
        self.assertFalse(self.year.is_current)
        self.assertTrue(next_year.is_current)

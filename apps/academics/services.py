# apps/academics/services.py
import logging

from django.utils import timezone

from apps.core.exceptions import InvalidState

from .models import AcademicPeriod

logger = logging.getLogger(__name__)


class NoAcademicPeriod(InvalidState):
    default_message = "No active academic period found"


def resolve_current_period(school, today=None):
    """
    Return the academic period work created ``today`` belongs to.

    The period of the school's current academic year whose date range covers
    ``today`` wins; otherwise the latest-starting period of that year is used.
    Raises ``NoAcademicPeriod`` when the current year has no periods at all.
    """
    today = today or timezone.localdate()
    periods = AcademicPeriod.objects.filter(
        academic_year__school=school,
        academic_year__is_current=True,
    )

    period = periods.filter(start_date__lte=today, end_date__gte=today).first()
    if period is not None:
        return period

    period = periods.order_by('-start_date').first()
    if period is None:
        raise NoAcademicPeriod()

    logger.debug(f"No period covers {today} for {school}; falling back to {period}")
    return period

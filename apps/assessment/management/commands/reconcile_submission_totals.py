"""
Management command to reconcile derived assessment totals.

Recomputes every assignment's total marks from its linked questions and every
submission's total score from its responses, reporting and repairing drift.
It is safe to run repeatedly; rows that already agree are left alone.
"""

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from apps.assessment.models import Assignment
from apps.assessment.services import reconcile_totals


class Command(BaseCommand):
    help = 'Recompute assignment total marks and submission total scores from their detail rows'

    def add_arguments(self, parser):
        parser.add_argument(
            '--assignment',
            help='Only reconcile this assignment (by id)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without fixing it',
        )

    def handle(self, *args, **options):
        assignments = Assignment.objects.order_by('created_at')
        if options['assignment']:
            try:
                assignments = assignments.filter(pk=options['assignment'])
                if not assignments.exists():
                    raise CommandError(f"Assignment {options['assignment']} does not exist")
            except ValidationError:
                raise CommandError(f"'{options['assignment']}' is not a valid assignment id")

        dry_run = options['dry_run']
        if dry_run:
            self.stdout.write('Dry run: no changes will be saved')

        assignment_fixes, submission_fixes = reconcile_totals(assignments, dry_run=dry_run)

        for assignment, stored, expected in assignment_fixes:
            self.stdout.write(
                self.style.WARNING(
                    f'Assignment {assignment.id} ({assignment.title}): total marks {stored} -> {expected}'
                )
            )
        for submission, stored, expected in submission_fixes:
            self.stdout.write(
                self.style.WARNING(
                    f'Submission {submission.id}: total score {stored} -> {expected}'
                )
            )

        verb = 'found' if dry_run else 'fixed'
        self.stdout.write(
            self.style.SUCCESS(
                f'\nSummary: {len(assignment_fixes)} assignment(s) and '
                f'{len(submission_fixes)} submission(s) {verb}'
            )
        )

# apps/assessment/forms.py

from decimal import Decimal

from django import forms
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError

from .models import Assignment, Question

MAX_MCQ_OPTIONS = 6
ANSWER_PREFIX = 'answer_'


class AssignmentForm(forms.Form):
    """Payload for creating an assignment."""

    class_subject = forms.UUIDField(label=_('Class subject'))
    title = forms.CharField(max_length=200, label=_('Title'))
    assignment_type = forms.ChoiceField(
        choices=Assignment.AssignmentType.choices,
        label=_('Assignment type')
    )
    description = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 3}),
        label=_('Description')
    )
    due_date = forms.DateTimeField(required=False, label=_('Due date'))
    duration = forms.IntegerField(
        required=False,
        min_value=1,
        label=_('Duration (minutes)')
    )
    # Missing means online
    is_online = forms.NullBooleanField(required=False, label=_('Online'))

    def clean_is_online(self):
        is_online = self.cleaned_data.get('is_online')
        return True if is_online is None else is_online

    def service_kwargs(self):
        data = self.cleaned_data
        return {
            'description': data['description'],
            'due_date': data['due_date'],
            'duration': data['duration'],
            'is_online': data['is_online'],
        }


class QuestionForm(forms.Form):
    """
    A question to append to an assignment. Options are entered one per line.
    """

    question_type = forms.ChoiceField(
        choices=Question.QuestionType.choices,
        label=_('Question type')
    )
    question_text = forms.CharField(
        widget=forms.Textarea(attrs={'rows': 3}),
        label=_('Question')
    )
    marks = forms.DecimalField(
        max_digits=6,
        decimal_places=2,
        min_value=Decimal('0.01'),
        label=_('Marks')
    )
    options = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 4}),
        help_text=_('One option per line'),
        label=_('Options')
    )
    correct_answer = forms.CharField(required=False, label=_('Correct answer'))

    def clean_options(self):
        options = self.cleaned_data.get('options') or ''
        return [line.strip() for line in options.splitlines() if line.strip()]

    def clean_correct_answer(self):
        return (self.cleaned_data.get('correct_answer') or '').strip() or None

    def clean(self):
        cleaned_data = super().clean()
        question_type = cleaned_data.get('question_type')
        options = cleaned_data.get('options') or []
        correct_answer = cleaned_data.get('correct_answer')

        if question_type == Question.QuestionType.MCQ:
            if len(options) < 2:
                self.add_error('options', _('Multiple choice questions need at least two options.'))
            elif len(options) > MAX_MCQ_OPTIONS:
                self.add_error('options', _('A question can have at most %(max)d options.') % {'max': MAX_MCQ_OPTIONS})
            if not correct_answer:
                self.add_error('correct_answer', _('Select the correct option.'))
            elif options and correct_answer not in options:
                self.add_error('correct_answer', _('The correct answer must be one of the options.'))

        elif question_type == Question.QuestionType.TRUE_FALSE:
            if not correct_answer or correct_answer.lower() not in ('true', 'false'):
                self.add_error('correct_answer', _('The correct answer must be True or False.'))
            else:
                cleaned_data['correct_answer'] = correct_answer.capitalize()
            cleaned_data['options'] = ['True', 'False']

        elif question_type:
            # Subjective questions keep an optional model answer and no options
            cleaned_data['options'] = None

        return cleaned_data


class EssayGradeForm(forms.Form):
    """Score for a single response. Bounds are checked against the question's marks later."""

    score = forms.DecimalField(max_digits=6, decimal_places=2, label=_('Score'))
    feedback = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'rows': 2}),
        label=_('Feedback')
    )

    def clean_feedback(self):
        # Leave stored feedback alone unless the field was sent
        if 'feedback' not in self.data:
            return None
        return self.cleaned_data.get('feedback', '')


class CorrectionForm(EssayGradeForm):
    """Override of an auto-graded response."""

    is_correct = forms.BooleanField(required=False, label=_('Correct'))


class SubmissionForm(forms.Form):
    """
    A student's answers, posted as ``answer_<question id>`` fields.
    """

    def clean(self):
        cleaned_data = super().clean()
        answers = {
            key[len(ANSWER_PREFIX):]: value
            for key, value in self.data.items()
            if key.startswith(ANSWER_PREFIX) and value.strip()
        }
        if not answers:
            raise ValidationError(_('Answer at least one question before submitting.'))
        cleaned_data['answers'] = answers
        return cleaned_data

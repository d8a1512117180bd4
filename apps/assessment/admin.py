# apps/assessment/admin.py

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import (
    Question, Assignment, AssignmentQuestion, AssignmentSubmission,
    QuestionResponse, ExamResult
)


class QuestionAdmin(admin.ModelAdmin):
    list_display = ['short_text', 'question_type', 'subject', 'marks', 'school', 'created_at']
    list_filter = ['question_type', 'school', 'subject']
    search_fields = ['question_text']
    raw_id_fields = ['created_by']

    def short_text(self, obj):
        return obj.question_text[:60]
    short_text.short_description = _('Question')


class AssignmentQuestionInline(admin.TabularInline):
    model = AssignmentQuestion
    extra = 0
    fields = ['order', 'question']
    raw_id_fields = ['question']


class AssignmentAdmin(admin.ModelAdmin):
    list_display = [
        'title', 'class_subject', 'assignment_type', 'total_marks',
        'due_date', 'is_published', 'submission_count'
    ]
    list_filter = ['assignment_type', 'is_published', 'is_online', 'academic_period']
    search_fields = ['title', 'created_by__email']
    readonly_fields = ['total_marks']
    raw_id_fields = ['created_by']
    inlines = [AssignmentQuestionInline]
    date_hierarchy = 'created_at'

    def submission_count(self, obj):
        return obj.submissions.count()
    submission_count.short_description = _('Submissions')


class QuestionResponseInline(admin.TabularInline):
    model = QuestionResponse
    extra = 0
    fields = ['question', 'student_answer', 'is_correct', 'teacher_score', 'feedback']
    readonly_fields = ['question', 'student_answer']


class AssignmentSubmissionAdmin(admin.ModelAdmin):
    """Totals are refolded by the grading pipeline, so they stay read-only here."""
    list_display = ['assignment', 'student', 'submitted_at', 'is_late', 'is_graded', 'total_score']
    list_filter = ['is_late', 'is_graded']
    search_fields = ['assignment__title', 'student__student_id', 'student__user__email']
    readonly_fields = ['total_score', 'version']
    inlines = [QuestionResponseInline]


class ExamResultAdmin(admin.ModelAdmin):
    list_display = ['student', 'class_subject', 'academic_period', 'exam_type', 'score', 'max_score', 'grade']
    list_filter = ['exam_type', 'grade', 'academic_period']
    search_fields = ['student__student_id', 'student__user__email']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# Register models with admin site
admin.site.register(Question, QuestionAdmin)
admin.site.register(Assignment, AssignmentAdmin)
admin.site.register(AssignmentSubmission, AssignmentSubmissionAdmin)
admin.site.register(ExamResult, ExamResultAdmin)

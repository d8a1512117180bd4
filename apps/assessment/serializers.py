# apps/assessment/serializers.py

from rest_framework import serializers

from apps.academics.models import ClassSubject, Student
from .models import Assignment, AssignmentQuestion, AssignmentSubmission, QuestionResponse


class TeacherAssignmentSerializer(serializers.ModelSerializer):
    """
    Row of a teacher's assignment list. Expects ``submission_count`` annotated.
    """
    total_marks = serializers.FloatField(read_only=True)
    class_name = serializers.CharField(source='class_subject.school_class.name', read_only=True)
    subject_name = serializers.CharField(source='class_subject.subject.name', read_only=True)
    submission_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'title', 'description', 'assignment_type', 'total_marks', 'due_date',
            'is_published', 'is_online', 'class_name', 'subject_name',
            'submission_count', 'created_at'
        ]
        read_only_fields = fields


class SubjectAssignmentSerializer(serializers.ModelSerializer):
    """
    Row of a class-subject's assignment list. Expects ``question_count``,
    ``submission_count`` and ``graded_count`` annotated.
    """
    total_marks = serializers.FloatField(read_only=True)
    question_count = serializers.IntegerField(read_only=True)
    submission_count = serializers.IntegerField(read_only=True)
    graded_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'title', 'description', 'assignment_type', 'total_marks', 'due_date',
            'duration', 'is_published', 'is_online', 'question_count',
            'submission_count', 'graded_count', 'created_at'
        ]
        read_only_fields = fields


class ClassSubjectSummarySerializer(serializers.ModelSerializer):
    class_name = serializers.CharField(source='school_class.name', read_only=True)
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    subject_code = serializers.CharField(source='subject.code', read_only=True)

    class Meta:
        model = ClassSubject
        fields = ['id', 'class_name', 'subject_name', 'subject_code']


class AssignmentDetailSerializer(serializers.ModelSerializer):
    total_marks = serializers.FloatField(read_only=True)
    class_name = serializers.CharField(source='class_subject.school_class.name', read_only=True)
    subject_name = serializers.CharField(source='class_subject.subject.name', read_only=True)
    class_subject_id = serializers.UUIDField(read_only=True)
    academic_period_name = serializers.CharField(source='academic_period.name', read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'title', 'description', 'assignment_type', 'total_marks', 'due_date',
            'duration', 'is_online', 'is_published', 'class_subject_id', 'class_name',
            'subject_name', 'academic_period_name', 'created_at'
        ]
        read_only_fields = fields


class QuestionResponseSerializer(serializers.ModelSerializer):
    teacher_score = serializers.FloatField(read_only=True, allow_null=True)

    class Meta:
        model = QuestionResponse
        fields = ['id', 'student_answer', 'is_correct', 'teacher_score', 'feedback']
        read_only_fields = fields


class AssignmentQuestionSerializer(serializers.ModelSerializer):
    """
    One ordered question of an assignment.

    With a ``responses`` mapping (question id -> ``QuestionResponse``) in the
    context, each row also carries the matching response. Set
    ``hide_answers`` in the context to blank out the canonical answer.
    """
    question_id = serializers.UUIDField(source='question.id', read_only=True)
    question_type = serializers.CharField(source='question.question_type', read_only=True)
    question_text = serializers.CharField(source='question.question_text', read_only=True)
    options = serializers.JSONField(source='question.options', read_only=True)
    correct_answer = serializers.SerializerMethodField()
    marks = serializers.FloatField(source='question.marks', read_only=True)
    response = serializers.SerializerMethodField()

    class Meta:
        model = AssignmentQuestion
        fields = [
            'id', 'question_id', 'order', 'question_type', 'question_text',
            'options', 'correct_answer', 'marks', 'response'
        ]

    def get_correct_answer(self, obj):
        if self.context.get('hide_answers'):
            return None
        return obj.question.correct_answer

    def get_response(self, obj):
        responses = self.context.get('responses')
        if responses is None:
            return None
        response = responses.get(obj.question_id)
        return QuestionResponseSerializer(response).data if response else None


class SubmissionSerializer(serializers.ModelSerializer):
    total_score = serializers.FloatField(read_only=True)

    class Meta:
        model = AssignmentSubmission
        fields = ['id', 'submitted_at', 'is_late', 'is_graded', 'total_score', 'version']
        read_only_fields = fields


class StudentSerializer(serializers.ModelSerializer):
    first_name = serializers.CharField(source='user.first_name', read_only=True)
    last_name = serializers.CharField(source='user.last_name', read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'student_id', 'first_name', 'last_name']


class StudentSubmissionStatusSerializer(StudentSerializer):
    """
    A class roster entry with the student's submission state. Reads the
    ``submissions`` mapping (student id -> submission) from the context.
    """
    has_submitted = serializers.SerializerMethodField()
    submission_id = serializers.SerializerMethodField()
    submitted_at = serializers.SerializerMethodField()
    is_late = serializers.SerializerMethodField()
    is_graded = serializers.SerializerMethodField()
    total_score = serializers.SerializerMethodField()

    class Meta(StudentSerializer.Meta):
        fields = StudentSerializer.Meta.fields + [
            'has_submitted', 'submission_id', 'submitted_at', 'is_late',
            'is_graded', 'total_score'
        ]

    def _submission(self, obj):
        return self.context['submissions'].get(obj.id)

    def get_has_submitted(self, obj):
        return self._submission(obj) is not None

    def get_submission_id(self, obj):
        submission = self._submission(obj)
        return str(submission.id) if submission else None

    def get_submitted_at(self, obj):
        submission = self._submission(obj)
        return serializers.DateTimeField().to_representation(submission.submitted_at) if submission else None

    def get_is_late(self, obj):
        submission = self._submission(obj)
        return submission.is_late if submission else False

    def get_is_graded(self, obj):
        submission = self._submission(obj)
        return submission.is_graded if submission else False

    def get_total_score(self, obj):
        submission = self._submission(obj)
        return float(submission.total_score) if submission else None

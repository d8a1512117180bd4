from django.urls import path
from . import views

app_name = 'assessment'

urlpatterns = [
    # Assignment URLs
    path('assignments/', views.teacher_assignment_list, name='assignment_list'),
    path('assignments/create/', views.create_assignment, name='assignment_create'),
    path('assignments/<uuid:assignment_id>/', views.assignment_detail, name='assignment_detail'),
    path('assignments/<uuid:assignment_id>/questions/add/', views.add_question, name='question_add'),
    path('assignments/questions/<uuid:assignment_question_id>/remove/', views.remove_question, name='question_remove'),
    path('assignments/<uuid:assignment_id>/publish/', views.publish_assignment, name='assignment_publish'),
    path('assignments/<uuid:assignment_id>/delete/', views.delete_assignment, name='assignment_delete'),
    path('class-subjects/<uuid:class_subject_id>/assignments/', views.subject_assignment_list, name='subject_assignment_list'),

    # Submission URLs
    path('assignments/<uuid:assignment_id>/submissions/', views.assignment_submissions, name='assignment_submissions'),
    path('submissions/<uuid:submission_id>/', views.submission_detail, name='submission_detail'),
    path('submissions/<uuid:submission_id>/grade/', views.grade_submission, name='grade_submission'),
    path('submissions/<uuid:submission_id>/publish/', views.publish_results, name='publish_results'),
    path('responses/<uuid:response_id>/grade/', views.grade_essay, name='grade_essay'),
    path('responses/<uuid:response_id>/correct/', views.correct_question, name='correct_question'),

    # Student URLs
    path('assignments/<uuid:assignment_id>/submit/', views.submit_assignment, name='assignment_submit'),
    path('assignments/<uuid:assignment_id>/result/', views.submission_result, name='submission_result'),
]

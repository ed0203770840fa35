# jobs/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # job listing / CRUD
    path('jobs/', views.jobs_collection, name='jobs'),                           # GET list, POST create
    path('jobs/<int:job_id>/', views.job_detail, name='job_detail'),             # GET, PATCH, DELETE
    path('jobs/<int:job_id>/close/', views.close_job, name='job_close'),
    path('recruiter/jobs/', views.recruiter_jobs, name='recruiter_jobs'),

    # application flow
    path('applications/', views.applications_collection, name='applications'),   # GET list, POST apply
    path('applications/feed/', views.application_feed, name='application_feed'),
    path('applications/<int:app_id>/status/', views.application_status, name='application_status'),
    path('applications/<int:app_id>/history/', views.application_history, name='application_history'),
]

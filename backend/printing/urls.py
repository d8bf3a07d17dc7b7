from django.urls import path

from . import views

app_name = 'printing'

urlpatterns = [
    path('pending/', views.pending_jobs, name='pending-jobs'),
    path('<int:job_id>/ack/', views.acknowledge_job, name='acknowledge-job'),
]

"""
URL mappings for the clinic records backend.

API paths omit trailing slashes, matching what the front-end calls.
Pages are served from the same app; ``/`` is the sign-in page and the
``LOGIN_URL`` target for anonymous visitors.
"""
from django.urls import path, include

from .auth_views import google_login_view, jwt_refresh_view, logout_view
from .views import consultations, health, pages, patients, students, users

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),

    path('api/auth/google', google_login_view, name='google_login_view'),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', logout_view),
    path('api/user/me', users.current_user),

    path('api/patients', patients.patients, name='patients'),
    path('api/patients/<int:pk>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<int:pk>/<slug:kind>', patients.patient_records, name='patient_records'),

    path('api/consultations', consultations.consultation_create, name='consultation_create'),
    path('api/consultations/<int:pk>', consultations.consultation_detail, name='consultation_detail'),
    path('api/consultations/<int:pk>/doctor-notes', consultations.consultation_doctor_notes,
         name='consultation_doctor_notes'),

    path('api/student/profile', students.student_profile, name='student_profile'),

    path('', pages.login_page, name='login_page'),
    path('dashboard', pages.dashboard, name='dashboard'),
    path('inventory', pages.inventory, name='inventory'),
    path('reports', pages.reports, name='reports'),
    path('student/profile-dashboard', pages.student_profile_dashboard, name='student_profile_dashboard'),
]

from django.urls import path
from . import views

urlpatterns = [
    path('audits/', views.audit_list, name='audit_list'),
    path('audits/next/', views.audit_next, name='audit_next'),
    path('audits/history/', views.audit_history, name='audit_history'),
    path('audits/<uuid:audit_id>/', views.audit_detail, name='audit_detail'),
    path('audits/<uuid:audit_id>/complete/', views.audit_complete, name='audit_complete'),
]

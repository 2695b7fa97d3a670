from django.urls import path
from . import views

urlpatterns = [
    path('statistics/current/', views.statistics_current, name='statistics_current'),
    path('statistics/period/', views.statistics_period, name='statistics_period'),
    path('statistics/progress/', views.statistics_progress, name='statistics_progress'),
    path('statistics/regenerate/', views.statistics_regenerate, name='statistics_regenerate'),
    path('dashboard/', views.dashboard_overview, name='dashboard_overview'),
]

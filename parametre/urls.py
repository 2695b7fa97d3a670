from django.urls import path
from . import views

urlpatterns = [
    path('activites/', views.recent_activities, name='recent_activities'),
    path('qualite/', views.quality_settings, name='quality_settings'),
]

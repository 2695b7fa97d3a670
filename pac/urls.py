from django.urls import path
from . import views

urlpatterns = [
    path('actions/', views.action_list, name='action_list'),
    path('actions/<uuid:action_id>/', views.action_detail, name='action_detail'),
    path('action-categories/', views.category_list, name='action_category_list'),
    path('action-categories/<uuid:category_id>/', views.category_detail, name='action_category_detail'),
]

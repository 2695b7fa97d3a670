from django.urls import path
from . import views

urlpatterns = [
    path('tasks/', views.task_list, name='task_list'),
    path('tasks/statistics/', views.task_statistics, name='task_statistics'),
    path('tasks/positions/', views.task_positions, name='task_positions'),
    path('tasks/category/<slug:slug>/', views.task_by_category, name='task_by_category'),
    path('tasks/<uuid:task_id>/', views.task_detail, name='task_detail'),
    path('task-categories/', views.category_list, name='task_category_list'),
    path('task-categories/initialize/', views.category_initialize, name='task_category_initialize'),
    path('task-categories/<uuid:category_id>/', views.category_detail, name='task_category_detail'),
]

from django.urls import path
from . import views

urlpatterns = [
    path('indicators/', views.indicator_list, name='indicator_list'),
    path('indicators/batch/', views.indicator_batch_update, name='indicator_batch_update'),
    path('indicators/<uuid:indicator_id>/', views.indicator_detail, name='indicator_detail'),
    path('indicators/<uuid:indicator_id>/documents/', views.indicator_documents, name='indicator_documents'),
    path('initialize/', views.initialize, name='quality_initialize'),
    path('initialize/status/', views.initialize_status, name='quality_initialize_status'),
]

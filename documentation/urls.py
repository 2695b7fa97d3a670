from django.urls import path
from . import views

urlpatterns = [
    path('documents/', views.document_list, name='document_list'),
    path('documents/upload/', views.document_upload, name='document_upload'),
    path('documents/<uuid:document_id>/', views.document_detail, name='document_detail'),
    path('documents/<uuid:document_id>/associate/', views.document_associate, name='document_associate'),
    path('documents/<uuid:document_id>/download/', views.document_download, name='document_download'),
]

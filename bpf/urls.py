from django.urls import path
from . import views

urlpatterns = [
    path('bpf/', views.bpf_list, name='bpf_list'),
    path('bpf/archives/', views.bpf_archives, name='bpf_archives'),
    path('bpf/<uuid:bpf_id>/', views.bpf_detail, name='bpf_detail'),
    path('bpf/<uuid:bpf_id>/submit/', views.bpf_submit, name='bpf_submit'),
    path('bpf/<uuid:bpf_id>/export/', views.bpf_export, name='bpf_export'),
]

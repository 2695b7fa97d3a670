from django.urls import path
from . import views

urlpatterns = [
    path('invitations/', views.invitation_list, name='invitation_list'),
    path('invitations/accept/', views.invitation_accept, name='invitation_accept'),
    path('invitations/<uuid:invitation_id>/revoke/', views.invitation_revoke, name='invitation_revoke'),
    path('invitations/<uuid:invitation_id>/resend/', views.invitation_resend, name='invitation_resend'),
]

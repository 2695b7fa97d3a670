"""
Signaux émis par le cycle de vie des invitations
"""
from django.dispatch import Signal

# Émis après la création ou le renvoi d'une invitation.
# Arguments: invitation, resent (bool)
invitation_sent = Signal()

from django.apps import AppConfig


class InvitationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'invitations'
    verbose_name = 'Invitations des collaborateurs externes'

    def ready(self):
        from . import receivers  # noqa: F401

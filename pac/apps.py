from django.apps import AppConfig


class PacConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pac'
    verbose_name = "Plan d'actions qualité"

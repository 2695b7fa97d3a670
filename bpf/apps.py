from django.apps import AppConfig


class BpfConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'bpf'
    verbose_name = 'Bilans pédagogiques et financiers'

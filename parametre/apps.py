from django.apps import AppConfig
import logging
import os
import sys

logger = logging.getLogger(__name__)

SKIPPED_COMMANDS = [
    'migrate', 'makemigrations', 'test', 'collectstatic', 'shell', 'dbshell',
    'flush', 'loaddata', 'dumpdata', 'generate_quality_statistics', 'init_qualite',
]


class ParametreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'parametre'
    verbose_name = 'Paramètres'

    def ready(self):
        """
        Démarre le scheduler APScheduler lorsque Django est prêt
        """
        from django.conf import settings

        if not getattr(settings, 'QUALITE_SCHEDULER_ENABLED', False) or getattr(settings, 'TESTING', False):
            return

        # Le serveur de développement lance deux processus : seul l'enfant démarre le scheduler
        if 'runserver' in sys.argv and os.environ.get('RUN_MAIN') != 'true':
            return

        if len(sys.argv) > 1 and sys.argv[1] in SKIPPED_COMMANDS:
            return

        import threading
        from .scheduler import start_scheduler

        def start_scheduler_delayed():
            """Démarre le scheduler dans un thread séparé après un court délai"""
            import time
            time.sleep(1)
            try:
                start_scheduler()
            except Exception as e:
                logger.error(f"Erreur lors du démarrage du scheduler: {e}", exc_info=True)

        threading.Thread(target=start_scheduler_delayed, daemon=True).start()

"""
Configuration du scheduler APScheduler pour la génération quotidienne des statistiques qualité
"""
from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.core.management import call_command
from django_apscheduler.jobstores import DjangoJobStore, register_events
import atexit
import logging

logger = logging.getLogger(__name__)

STATISTICS_JOB_ID = 'generate_quality_statistics_daily'

# Variable globale pour le scheduler
scheduler = None


def generate_statistics_job():
    """Job de génération des instantanés statistiques de tous les organismes"""
    try:
        logger.info("Démarrage de la génération quotidienne des statistiques qualité...")
        call_command('generate_quality_statistics')
        logger.info("Génération des statistiques qualité terminée")
    except Exception as e:
        logger.error(f"Erreur lors de la génération des statistiques qualité: {e}", exc_info=True)


def start_scheduler():
    """
    Démarre le scheduler et enregistre le job quotidien s'il n'existe pas encore
    """
    global scheduler

    if scheduler and scheduler.running:
        logger.warning("Le scheduler est déjà en cours d'exécution")
        return scheduler

    scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)
    scheduler.add_jobstore(DjangoJobStore(), "default")
    register_events(scheduler)

    # Démarrer avant d'ajouter les jobs pour que DjangoJobStore charge les jobs existants
    scheduler.start()

    if scheduler.get_job(STATISTICS_JOB_ID) is None:
        cron = settings.QUALITE.get('STATISTICS_CRON', {'hour': 2, 'minute': 0})
        scheduler.add_job(
            generate_statistics_job,
            trigger='cron',
            hour=cron.get('hour', 2),
            minute=cron.get('minute', 0),
            id=STATISTICS_JOB_ID,
            name='Génération quotidienne des statistiques qualité',
            replace_existing=False,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600
        )
        logger.info(f"Job {STATISTICS_JOB_ID} créé ({cron.get('hour', 2):02d}h{cron.get('minute', 0):02d})")
    else:
        logger.info(f"Job {STATISTICS_JOB_ID} chargé depuis la base de données")

    atexit.register(stop_scheduler)
    logger.info("Scheduler démarré avec succès")
    return scheduler


def stop_scheduler():
    """
    Arrête le scheduler proprement
    """
    global scheduler
    if scheduler and scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler arrêté")
    scheduler = None

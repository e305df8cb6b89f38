"""
Scheduler APScheduler - revue quotidienne des consultations.
- Statistiques de l'année en cours
- Consultations dont la date limite approche
- Habilitations fournisseurs arrivant à échéance
"""

import logging
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED

from procurement.config import get_settings
from procurement.database import get_db_context
from procurement.services.consultation import ConsultationService
from procurement.services.provider import ClearanceService

logger = logging.getLogger(__name__)
settings = get_settings()

UPCOMING_DEADLINE_DAYS = 7

# Instance globale du scheduler
scheduler = BackgroundScheduler(
    timezone=settings.SCHEDULER_TIMEZONE,
    job_defaults={
        "coalesce": True,            # Fusionner les exécutions manquées
        "max_instances": 1,          # Une seule instance par job
        "misfire_grace_time": 3600,  # 1h de grâce
    },
)


def job_daily_review() -> dict:
    """
    Revue quotidienne en lecture seule, exécutée dans une session dédiée.
    Retourne le résumé journalisé.
    """
    logger.info("=" * 60)
    logger.info(f"🕐 REVUE QUOTIDIENNE DÉMARRÉE | {datetime.utcnow().isoformat()}")
    logger.info("=" * 60)

    year = str(datetime.utcnow().year)
    with get_db_context() as db:
        statistics = ConsultationService(db).statistics(year)
        logger.info(
            f"📊 {year}: {statistics['total_consultations']} consultation(s), "
            f"{statistics['active_consultations']} active(s), "
            f"{statistics['expired_consultations']} expirée(s), "
            f"enveloppe totale {statistics['total_allocated_amount']:.2f}"
        )

        upcoming = ConsultationService(db).upcoming_deadlines(UPCOMING_DEADLINE_DAYS)
        for consultation in upcoming:
            logger.info(f"   ⏳ {consultation.reference} | date limite {consultation.deadline:%Y-%m-%d %H:%M}")
        logger.info(f"📅 {len(upcoming)} date(s) limite(s) dans les {UPCOMING_DEADLINE_DAYS} prochains jours")

        expiring = ClearanceService(db).expiring_soon(settings.CLEARANCE_ALERT_DAYS)
        for clearance in expiring:
            logger.warning(
                f"   ⚠️ Habilitation #{clearance.id} ({clearance.representator_name}) "
                f"expire le {clearance.end_date} [{clearance.alert_level}]"
            )
        logger.info(f"🔐 {len(expiring)} habilitation(s) expirent sous {settings.CLEARANCE_ALERT_DAYS} jours")

        summary = {
            "year": year,
            "total_consultations": statistics["total_consultations"],
            "upcoming_deadlines": len(upcoming),
            "expiring_clearances": len(expiring),
        }

    logger.info(f"🏁 REVUE QUOTIDIENNE TERMINÉE | {datetime.utcnow().isoformat()}")
    return summary


def scheduler_event_listener(event):
    """Listener pour les événements du scheduler"""
    if event.exception:
        logger.error(f"❌ Job {event.job_id} a échoué: {event.exception}")
    else:
        logger.info(f"✅ Job {event.job_id} exécuté avec succès")


def init_scheduler():
    """Initialise et démarre le scheduler avec la revue quotidienne"""
    scheduler.add_listener(scheduler_event_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    scheduler.add_job(
        func=job_daily_review,
        trigger=CronTrigger(hour=settings.REVIEW_SCHEDULE_HOUR, minute=0),
        id="daily_review",
        name=f"Revue quotidienne {settings.REVIEW_SCHEDULE_HOUR}h - Consultations et habilitations",
        replace_existing=True,
    )

    scheduler.start()

    logger.info("⏰ Scheduler démarré:")
    for job in scheduler.get_jobs():
        logger.info(f"   📌 {job.name} | Prochain run: {job.next_run_time}")

    return scheduler


def shutdown_scheduler():
    """Arrête proprement le scheduler"""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("⏰ Scheduler arrêté")

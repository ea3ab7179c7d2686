import logging
from apscheduler.schedulers.background import BackgroundScheduler
from hankosign.database import SessionLocal
from hankosign.modules.workflows.services.reminders import notify_overdue_approvals

logger = logging.getLogger(__name__)

def start_overdue_reminder_job() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    def job():
        with SessionLocal() as session:
            try:
                notify_overdue_approvals(session)
            except Exception:
                logger.exception("Overdue approval reminder job failed")

    scheduler.add_job(job, 'interval', days=1)  # every 24 hours
    scheduler.start()
    logger.info("Overdue approval reminder job started")
    return scheduler

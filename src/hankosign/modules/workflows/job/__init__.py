from .overdue_reminders import start_overdue_reminder_job

__all__ = ["start_overdue_reminder_job"]

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, Optional
import logging

from ..ports.audit_logger import AuditLogger
from ..ports.notification_sink import NotificationSink
from ..ports.reminder_repo import ReminderRepository
from .reminder_policy import PlannedReminder, plan_dispatch
from ...utils import as_utc

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    processed: int
    sent: int = 0
    failed: int = 0
    not_due: int = 0
    skipped_orphaned: int = 0
    skipped_unknown_type: int = 0


@dataclass
class ReminderDispatcher:
    repo: ReminderRepository
    sink: NotificationSink
    audit: Optional[AuditLogger] = None
    display_tz: tzinfo = timezone.utc

    def run_dispatch_cycle(self, now: datetime) -> DispatchResult:
        """Run one pass over every pending reminder.

        A failure to fetch the reminders propagates and nothing is processed.
        A failure on one reminder is logged and the pass moves on.
        """
        reminders = self.repo.fetch_pending()
        logger.info(f"Found {len(reminders)} pending reminders")

        plan = plan_dispatch(now, reminders, self.display_tz)
        result = DispatchResult(
            processed=plan.processed,
            not_due=plan.not_due,
            skipped_orphaned=plan.skipped_orphaned,
            skipped_unknown_type=plan.skipped_unknown_type,
        )

        sent_at = as_utc(now)
        for item in plan.due:
            if self._deliver(item, sent_at):
                result.sent += 1
            else:
                result.failed += 1

        logger.info(
            f"Dispatch cycle finished: processed={result.processed} sent={result.sent} "
            f"failed={result.failed} not_due={result.not_due} "
            f"orphaned={result.skipped_orphaned} unknown_type={result.skipped_unknown_type}"
        )
        return result

    def _deliver(self, item: PlannedReminder, sent_at: datetime) -> bool:
        notification = item.notification
        logger.info(f"Sending {item.reminder_type.value} reminder for appointment {notification.appointment_id}")

        try:
            self.sink.create(notification)
        except Exception as e:
            # Reminder stays pending and is reconsidered next cycle
            logger.error(f"Error creating notification for reminder {item.reminder_id}: {e}")
            self._audit("reminder_notification_failed", item, success=False, details={"error": str(e)})
            return False

        try:
            updated = self.repo.mark_sent(item.reminder_id, sent_at)
        except Exception as e:
            # Notification already landed; the still-pending row may be sent again
            logger.error(f"Error updating reminder {item.reminder_id}: {e}")
            self._audit("reminder_update_failed", item, success=False, details={"error": str(e)})
            return False

        if not updated:
            logger.warning(f"Reminder {item.reminder_id} was no longer pending when marking it sent")
        self._audit("reminder_sent", item, details={"sent_at": sent_at.isoformat()})
        return True

    def _audit(self, action: str, item: PlannedReminder, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        if self.audit is None:
            return
        self.audit.log(
            action,
            item.reminder_id,
            appointment_id=item.notification.appointment_id,
            user_id=item.notification.user_id,
            success=success,
            details={"reminder_type": item.reminder_type.value, **(details or {})},
        )

#!/usr/bin/env python3
"""
Run one appointment reminder dispatch cycle.
Point cron at this script (every 5 minutes or more often):

    */5 * * * * cd /srv/telecare && python run_dispatch.py
"""
import argparse
import logging
import os
import sys
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser
from sqlmodel import Session

# Add the project directory to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from telecare.config import settings
from telecare.database import engine, create_db_and_tables
from telecare.application.services.dispatch_service import DispatchResult, ReminderDispatcher
from telecare.application.services.reminder_policy import resolve_timezone
from telecare.exceptions import ReminderStoreError
from telecare.infrastructure.audit.std_logger import StdAuditLogger
from telecare.infrastructure.persistence.sqlalchemy.repositories.notification_sink_sql import SqlNotificationSink
from telecare.infrastructure.persistence.sqlalchemy.repositories.reminder_repository_sql import SqlReminderRepository
from telecare.utils import utcnow

logger = logging.getLogger("run_dispatch")


def run_once(session: Session, now: datetime) -> DispatchResult:
    dispatcher = ReminderDispatcher(
        repo=SqlReminderRepository(session),
        sink=SqlNotificationSink(session),
        audit=StdAuditLogger(),
        display_tz=resolve_timezone(settings.DISPLAY_TIMEZONE),
    )
    return dispatcher.run_dispatch_cycle(now)


def main(argv: Optional[list] = None) -> int:
    arg_parser = argparse.ArgumentParser(description="Send due appointment reminders")
    arg_parser.add_argument("--now", help="ISO timestamp to dispatch as (defaults to the current UTC time)")
    arg_parser.add_argument("--init-db", action="store_true", help="create missing tables first")
    args = arg_parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL), format=settings.LOG_FORMAT)

    now = utcnow()
    if args.now:
        try:
            now = date_parser.isoparse(args.now)
        except (ValueError, OverflowError) as e:
            logger.error(f"Invalid --now value {args.now!r}: {e}")
            return 2
    if args.init_db:
        create_db_and_tables()

    try:
        with Session(engine) as session:
            result = run_once(session, now)
    except ReminderStoreError as e:
        logger.error(f"Dispatch cycle aborted: {e}")
        return 1

    print(f"✅ Processed {result.processed} reminders, sent {result.sent}, failed {result.failed}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

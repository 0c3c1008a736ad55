from dataclasses import asdict
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session
import logging

from ..config import settings
from ..database import get_session
from ..application.services.dispatch_service import ReminderDispatcher
from ..application.services.reminder_policy import resolve_timezone
from ..application.services.reminder_scheduling_service import ReminderSchedulingService
from ..infrastructure.audit.std_logger import StdAuditLogger
from ..infrastructure.persistence.sqlalchemy.repositories.notification_sink_sql import SqlNotificationSink
from ..infrastructure.persistence.sqlalchemy.repositories.reminder_repository_sql import SqlReminderRepository
from ..schemas.common.common import ErrorResponse
from ..schemas.reminders.reminder import (
    DispatchErrorResponse,
    DispatchResponse,
    ReminderResponse,
    ScheduleRemindersResponse,
)
from ..utils import utcnow, verify_service_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reminders"])

oauth2_scheme = HTTPBearer(auto_error=False)

DISPATCH_PATH = "/functions/send-appointment-reminders"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_now() -> datetime:
    return utcnow()


def get_reminder_dispatcher(session: Session = Depends(get_session)) -> ReminderDispatcher:
    return ReminderDispatcher(
        repo=SqlReminderRepository(session),
        sink=SqlNotificationSink(session),
        audit=StdAuditLogger(),
        display_tz=resolve_timezone(settings.DISPLAY_TIMEZONE),
    )


def get_scheduling_service(session: Session = Depends(get_session)) -> ReminderSchedulingService:
    return ReminderSchedulingService(repo=SqlReminderRepository(session))


def require_service_key(credentials: HTTPAuthorizationCredentials = Depends(oauth2_scheme)):
    token = credentials.credentials if credentials else None
    if not verify_service_key(token):
        raise HTTPException(status_code=401, detail="Invalid service key")


@router.options(DISPATCH_PATH)
def send_appointment_reminders_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.api_route(
    DISPATCH_PATH,
    methods=["GET", "POST"],
    response_model=DispatchResponse,
    responses={500: {"model": DispatchErrorResponse}},
)
def send_appointment_reminders(
    now: datetime = Depends(get_now),
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
):
    # Request body, if any, is ignored
    try:
        result = dispatcher.run_dispatch_cycle(now)
    except Exception as e:
        logger.error(f"Error in send-appointment-reminders: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": str(e)}, headers=CORS_HEADERS)

    return JSONResponse(
        content=DispatchResponse(processed=result.processed).model_dump(),
        headers=CORS_HEADERS,
    )


@router.post(
    "/appointments/{appointment_id}/reminders",
    status_code=201,
    response_model=ScheduleRemindersResponse,
    dependencies=[Depends(require_service_key)],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def schedule_appointment_reminders(
    appointment_id: str,
    service: ReminderSchedulingService = Depends(get_scheduling_service),
):
    try:
        created = service.schedule_for_appointment(appointment_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error scheduling reminders for appointment {appointment_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to schedule reminders")

    logger.info(f"Scheduled {len(created)} reminders for appointment {appointment_id}")
    return ScheduleRemindersResponse(
        appointment_id=appointment_id,
        created=[ReminderResponse(**asdict(r)) for r in created],
    )

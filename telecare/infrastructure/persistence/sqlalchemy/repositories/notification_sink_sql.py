from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .....db.models import Notification
from .....exceptions import NotificationWriteError
from .....application.ports.notification_sink import NotificationSink, NotificationDto


class SqlNotificationSink(NotificationSink):
    def __init__(self, session: Session):
        self.session = session

    def create(self, notification: NotificationDto) -> None:
        row = Notification(
            user_id=notification.user_id,
            title=notification.title,
            message=notification.message,
            type=notification.type,
            related_id=notification.related_id,
            appointment_id=notification.appointment_id,
        )
        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise NotificationWriteError(f"Error creating notification: {e}") from e

"""
Notification Schemas
"""

from datetime import datetime

from pydantic import BaseModel

from medclaims.core.enums import NotificationKind


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    kind: NotificationKind
    timestamp: datetime
    read: bool

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread: int

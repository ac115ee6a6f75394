from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    title: str
    message: str
    type: str | None
    related_id: int | None
    is_read: bool
    created_at: str


class UnreadCount(BaseModel):
    count: int


class MarkAllRead(BaseModel):
    updated_ids: list[int]

# reunion/schemas/media.py
# Wire models. Python attributes are snake_case; JSON is camelCase (alias generator).
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Literal, Optional, List


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaItem(_Wire):
    id: str
    name: str
    content_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    kind: Literal["photo", "video"]
    mime_type: str
    created_at: Optional[str] = None
    size_bytes: int = 0
    width: Optional[int] = None
    height: Optional[int] = None
    video_duration_seconds: Optional[int] = None


class ContactRecord(_Wire):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    image_url: Optional[str] = None
    image_urls: List[str] = []
    blood_group: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    whatsapp: Optional[str] = None
    city: Optional[str] = None


class StatsSnapshot(_Wire):
    total_friends: int = 0
    total_photos: int = 0
    total_videos: int = 0
    cities: List[str] = []
    unique_cities_count: int = 0


class ConversationMessage(_Wire):
    sender: str
    timestamp: str
    content: str


class ConversationMoment(_Wire):
    category: str
    summary: str
    messages: List[ConversationMessage]


# ---- response envelopes ----

class ContactsResponse(_Wire):
    success: bool
    contacts: List[ContactRecord]
    count: int


class PhotosResponse(_Wire):
    files: List[MediaItem]
    total: int
    has_more: bool


class StatsResponse(_Wire):
    success: bool
    stats: StatsSnapshot
    error: Optional[str] = None


class ConversationsResponse(_Wire):
    moments: List[ConversationMoment]
    count: int

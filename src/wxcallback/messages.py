"""
Inbound message types.

Every variant is an immutable dataclass holding the common envelope fields
in `header` plus its own fields. The variant tag is the class attribute
`type`, matching the `MsgType` value on the wire.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union


@dataclass(frozen=True)
class RawEnvelope:
    """Untyped XML envelope. Every field is the raw text, empty if absent."""
    to_user_name: str = ""
    from_user_name: str = ""
    create_time: str = ""
    msg_type: str = ""
    msg_id: str = ""
    event: str = ""
    event_key: str = ""
    ticket: str = ""
    latitude: str = ""
    longitude: str = ""
    precision: str = ""
    location_x: str = ""
    location_y: str = ""
    scale: str = ""
    label: str = ""
    media_id: str = ""
    pic_url: str = ""
    thumb_media_id: str = ""
    title: str = ""
    description: str = ""
    url: str = ""
    recognition: str = ""
    content: str = ""
    format: str = ""
    page_path: str = ""
    app_id: str = ""
    thumb_url: str = ""
    status: str = ""
    total_count: str = ""
    filter_count: str = ""
    sent_count: str = ""
    error_count: str = ""
    template_id: str = ""
    client_msg_id: str = ""


@dataclass(frozen=True)
class MessageHeader:
    """Fields common to every message and event."""
    to_user: str
    from_user: str
    create_time: int
    msg_type: str
    msg_id: int = 0


@dataclass(frozen=True)
class TextMessage:
    """Text message."""
    type: ClassVar[str] = "text"
    header: MessageHeader
    content: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ImageMessage:
    """Image message."""
    type: ClassVar[str] = "image"
    header: MessageHeader
    pic_url: str = ""
    media_id: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class VoiceMessage:
    """Voice message, with speech recognition text when enabled."""
    type: ClassVar[str] = "voice"
    header: MessageHeader
    media_id: str = ""
    format: str = ""
    recognition: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class VideoMessage:
    type: ClassVar[str] = "video"
    header: MessageHeader
    media_id: str = ""
    thumb_media_id: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ShortVideoMessage:
    type: ClassVar[str] = "shortvideo"
    header: MessageHeader
    media_id: str = ""
    thumb_media_id: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class LocationMessage:
    """Location shared by the user."""
    type: ClassVar[str] = "location"
    header: MessageHeader
    location_x: float = 0.0
    location_y: float = 0.0
    scale: int = 0
    label: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)

    @property
    def location(self) -> tuple[float, float]:
        """Returns (latitude, longitude)."""
        return self.location_x, self.location_y


@dataclass(frozen=True)
class LinkMessage:
    type: ClassVar[str] = "link"
    header: MessageHeader
    title: str = ""
    description: str = ""
    url: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class MiniProgramPageMessage:
    """Mini-program card sent to customer service."""
    type: ClassVar[str] = "miniprogrampage"
    header: MessageHeader
    app_id: str = ""
    title: str = ""
    page_path: str = ""
    thumb_url: str = ""
    thumb_media_id: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class UnknownMessage:
    """Message of a type this library does not model; see `header.msg_type`."""
    type: ClassVar[str] = "unknown"
    header: MessageHeader
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


Message = Union[
    TextMessage,
    ImageMessage,
    VoiceMessage,
    VideoMessage,
    ShortVideoMessage,
    LocationMessage,
    LinkMessage,
    MiniProgramPageMessage,
    UnknownMessage,
]

MESSAGE_TYPES = {
    cls.type: cls
    for cls in (
        TextMessage,
        ImageMessage,
        VoiceMessage,
        VideoMessage,
        ShortVideoMessage,
        LocationMessage,
        LinkMessage,
        MiniProgramPageMessage,
    )
}

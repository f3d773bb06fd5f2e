"""
Inbound event types.

Events arrive with `MsgType` "event"; the `Event` value selects the
variant and is matched literally, since the platform mixes lower and upper
case names.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from .messages import MessageHeader, RawEnvelope


EVENT_SUBSCRIBE = "subscribe"
EVENT_UNSUBSCRIBE = "unsubscribe"
EVENT_SCAN = "SCAN"
EVENT_LOCATION = "LOCATION"
EVENT_CLICK = "CLICK"
EVENT_VIEW = "VIEW"
EVENT_MASS_SEND_JOB_FINISH = "MASSSENDJOBFINISH"
EVENT_TEMPLATE_SEND_JOB_FINISH = "TEMPLATESENDJOBFINISH"


@dataclass(frozen=True)
class SubscribeEvent:
    """
    User followed the account.

    `event_key` and `ticket` are set when the follow came from scanning a
    parametric QR code.
    """
    type: ClassVar[str] = EVENT_SUBSCRIBE
    header: MessageHeader
    event: str = EVENT_SUBSCRIBE
    event_key: str = ""
    ticket: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class UnsubscribeEvent:
    type: ClassVar[str] = EVENT_UNSUBSCRIBE
    header: MessageHeader
    event: str = EVENT_UNSUBSCRIBE
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ScanEvent:
    """Existing follower scanned a parametric QR code."""
    type: ClassVar[str] = EVENT_SCAN
    header: MessageHeader
    event: str = EVENT_SCAN
    event_key: str = ""
    ticket: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class LocationEvent:
    """Periodic location report."""
    type: ClassVar[str] = EVENT_LOCATION
    header: MessageHeader
    event: str = EVENT_LOCATION
    latitude: float = 0.0
    longitude: float = 0.0
    precision: float = 0.0
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ClickEvent:
    """Menu click that pulls a message."""
    type: ClassVar[str] = EVENT_CLICK
    header: MessageHeader
    event: str = EVENT_CLICK
    event_key: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class ViewEvent:
    """Menu click that opens a URL; `event_key` holds the URL."""
    type: ClassVar[str] = EVENT_VIEW
    header: MessageHeader
    event: str = EVENT_VIEW
    event_key: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class MassSendJobFinishEvent:
    """Mass send job finished."""
    type: ClassVar[str] = EVENT_MASS_SEND_JOB_FINISH
    header: MessageHeader
    event: str = EVENT_MASS_SEND_JOB_FINISH
    status: str = ""
    total_count: int = 0
    filter_count: int = 0
    sent_count: int = 0
    error_count: int = 0
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class TemplateSendJobFinishEvent:
    """Template message delivery finished; the job id is `header.msg_id`."""
    type: ClassVar[str] = EVENT_TEMPLATE_SEND_JOB_FINISH
    header: MessageHeader
    event: str = EVENT_TEMPLATE_SEND_JOB_FINISH
    status: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class UnknownEvent:
    """Event this library does not model; `event` holds the raw name."""
    type: ClassVar[str] = "unknown"
    header: MessageHeader
    event: str = ""
    raw: Optional[RawEnvelope] = field(default=None, repr=False, compare=False)


Event = Union[
    SubscribeEvent,
    UnsubscribeEvent,
    ScanEvent,
    LocationEvent,
    ClickEvent,
    ViewEvent,
    MassSendJobFinishEvent,
    TemplateSendJobFinishEvent,
    UnknownEvent,
]

EVENT_TYPES = {
    cls.type: cls
    for cls in (
        SubscribeEvent,
        UnsubscribeEvent,
        ScanEvent,
        LocationEvent,
        ClickEvent,
        ViewEvent,
        MassSendJobFinishEvent,
        TemplateSendJobFinishEvent,
    )
}

"""
Classification of inbound callback XML into typed messages and events.

Parsing is a single pass: the XML is read into a `RawEnvelope`, then the
`MsgType` / `Event` values pick the variant, which copies only the fields
relevant to it. Unrecognized types degrade to `UnknownMessage` or
`UnknownEvent` instead of failing.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Union

from .events import (
    EVENT_CLICK,
    EVENT_LOCATION,
    EVENT_MASS_SEND_JOB_FINISH,
    EVENT_SCAN,
    EVENT_SUBSCRIBE,
    EVENT_TEMPLATE_SEND_JOB_FINISH,
    EVENT_UNSUBSCRIBE,
    EVENT_VIEW,
    ClickEvent,
    Event,
    LocationEvent,
    MassSendJobFinishEvent,
    ScanEvent,
    SubscribeEvent,
    TemplateSendJobFinishEvent,
    UnknownEvent,
    UnsubscribeEvent,
    ViewEvent,
)
from .messages import (
    ImageMessage,
    LinkMessage,
    LocationMessage,
    Message,
    MessageHeader,
    MiniProgramPageMessage,
    RawEnvelope,
    ShortVideoMessage,
    TextMessage,
    UnknownMessage,
    VideoMessage,
    VoiceMessage,
)
from .types import EmptyPayloadError, ParseError

logger = logging.getLogger(__name__)

MSG_TYPE_EVENT = "event"

# XML element name -> RawEnvelope attribute
_FIELDS = {
    "ToUserName": "to_user_name",
    "FromUserName": "from_user_name",
    "CreateTime": "create_time",
    "MsgType": "msg_type",
    "MsgId": "msg_id",
    "MsgID": "msg_id",
    "Event": "event",
    "EventKey": "event_key",
    "Ticket": "ticket",
    "Latitude": "latitude",
    "Longitude": "longitude",
    "Precision": "precision",
    "Location_X": "location_x",
    "Location_Y": "location_y",
    "Scale": "scale",
    "Label": "label",
    "MediaId": "media_id",
    "PicUrl": "pic_url",
    "ThumbMediaId": "thumb_media_id",
    "Title": "title",
    "Description": "description",
    "Url": "url",
    "Recognition": "recognition",
    "Content": "content",
    "Format": "format",
    "PagePath": "page_path",
    "AppId": "app_id",
    "ThumbUrl": "thumb_url",
    "Status": "status",
    "TotalCount": "total_count",
    "FilterCount": "filter_count",
    "SentCount": "sent_count",
    "ErrorCount": "error_count",
    "TemplateID": "template_id",
    "ClientMsgId": "client_msg_id",
}


def _to_bytes(data: Union[bytes, str]) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def parse_raw_envelope(data: Union[bytes, str, None]) -> RawEnvelope:
    """
    Parse callback XML into an untyped envelope.

    Args:
        data: XML document with an <xml> root element

    Returns:
        RawEnvelope with the text of each known element

    Raises:
        EmptyPayloadError: If data is None or empty
        ParseError: If data is not well-formed XML or the root is not <xml>
    """
    if not data:
        raise EmptyPayloadError()

    raw_data = _to_bytes(data)
    try:
        root = ET.fromstring(raw_data)
    except ET.ParseError as e:
        raise ParseError(raw_data, str(e)) from e

    if root.tag != "xml":
        raise ParseError(raw_data, f"expected element <xml>, got <{root.tag}>")

    values = {}
    for child in root:
        name = _FIELDS.get(child.tag)
        if name is not None:
            values[name] = child.text or ""
    return RawEnvelope(**values)


class _Converter:
    """Typed field access over a RawEnvelope, reporting bad numbers as ParseError."""

    def __init__(self, raw: RawEnvelope, raw_data: bytes) -> None:
        self.raw = raw
        self.raw_data = raw_data

    def as_int(self, name: str) -> int:
        value = getattr(self.raw, name).strip()
        if not value:
            return 0
        try:
            return int(value)
        except ValueError as e:
            raise ParseError(self.raw_data, f"invalid integer in {name}") from e

    def as_float(self, name: str) -> float:
        value = getattr(self.raw, name).strip()
        try:
            return float(value) if value else 0.0
        except ValueError:
            return 0.0

    def header(self, msg_type: str) -> MessageHeader:
        return MessageHeader(
            to_user=self.raw.to_user_name,
            from_user=self.raw.from_user_name,
            create_time=self.as_int("create_time"),
            msg_type=msg_type,
            msg_id=self.as_int("msg_id"),
        )


def _parse_event(conv: _Converter) -> Event:
    raw = conv.raw
    header = conv.header(MSG_TYPE_EVENT)
    name = raw.event.strip()

    if name == EVENT_SUBSCRIBE:
        return SubscribeEvent(header, event=name, event_key=raw.event_key, ticket=raw.ticket, raw=raw)
    if name == EVENT_UNSUBSCRIBE:
        return UnsubscribeEvent(header, event=name, raw=raw)
    if name == EVENT_SCAN:
        return ScanEvent(header, event=name, event_key=raw.event_key, ticket=raw.ticket, raw=raw)
    if name == EVENT_LOCATION:
        return LocationEvent(
            header,
            event=name,
            latitude=conv.as_float("latitude"),
            longitude=conv.as_float("longitude"),
            precision=conv.as_float("precision"),
            raw=raw,
        )
    if name == EVENT_CLICK:
        return ClickEvent(header, event=name, event_key=raw.event_key, raw=raw)
    if name == EVENT_VIEW:
        return ViewEvent(header, event=name, event_key=raw.event_key, raw=raw)
    if name == EVENT_MASS_SEND_JOB_FINISH:
        return MassSendJobFinishEvent(
            header,
            event=name,
            status=raw.status,
            total_count=conv.as_int("total_count"),
            filter_count=conv.as_int("filter_count"),
            sent_count=conv.as_int("sent_count"),
            error_count=conv.as_int("error_count"),
            raw=raw,
        )
    if name == EVENT_TEMPLATE_SEND_JOB_FINISH:
        return TemplateSendJobFinishEvent(header, event=name, status=raw.status, raw=raw)

    logger.debug("Unrecognized event %r, returning UnknownEvent", name)
    return UnknownEvent(header, event=name, raw=raw)


def _parse_message(conv: _Converter, msg_type: str) -> Message:
    raw = conv.raw
    header = conv.header(msg_type)

    if msg_type == TextMessage.type:
        return TextMessage(header, content=raw.content, raw=raw)
    if msg_type == ImageMessage.type:
        return ImageMessage(header, pic_url=raw.pic_url, media_id=raw.media_id, raw=raw)
    if msg_type == VoiceMessage.type:
        return VoiceMessage(
            header,
            media_id=raw.media_id,
            format=raw.format,
            recognition=raw.recognition,
            raw=raw,
        )
    if msg_type == VideoMessage.type:
        return VideoMessage(header, media_id=raw.media_id, thumb_media_id=raw.thumb_media_id, raw=raw)
    if msg_type == ShortVideoMessage.type:
        return ShortVideoMessage(
            header, media_id=raw.media_id, thumb_media_id=raw.thumb_media_id, raw=raw
        )
    if msg_type == LocationMessage.type:
        return LocationMessage(
            header,
            location_x=conv.as_float("location_x"),
            location_y=conv.as_float("location_y"),
            scale=conv.as_int("scale"),
            label=raw.label,
            raw=raw,
        )
    if msg_type == LinkMessage.type:
        return LinkMessage(
            header, title=raw.title, description=raw.description, url=raw.url, raw=raw
        )
    if msg_type == MiniProgramPageMessage.type:
        return MiniProgramPageMessage(
            header,
            app_id=raw.app_id,
            title=raw.title,
            page_path=raw.page_path,
            thumb_url=raw.thumb_url,
            thumb_media_id=raw.thumb_media_id,
            raw=raw,
        )

    logger.debug("Unrecognized message type %r, returning UnknownMessage", msg_type)
    return UnknownMessage(header, raw=raw)


def parse_message(data: Union[bytes, str, None]) -> Union[Message, Event]:
    """
    Parse callback XML into a typed message or event.

    Args:
        data: Decrypted callback XML

    Returns:
        One of the message or event variants

    Raises:
        EmptyPayloadError: If data is None or empty
        ParseError: If the XML is malformed or a numeric field is invalid
    """
    raw = parse_raw_envelope(data)
    conv = _Converter(raw, _to_bytes(data))

    msg_type = raw.msg_type.strip().lower()
    if msg_type == MSG_TYPE_EVENT or raw.event.strip():
        result = _parse_event(conv)
    else:
        result = _parse_message(conv, msg_type)

    logger.debug("Parsed callback as %s", type(result).__name__)
    return result


class MessageParser:
    """Parser object for callers that take a pluggable parse strategy."""

    def parse(self, data: Union[bytes, str, None]) -> Union[Message, Event]:
        return parse_message(data)

"""Tests for message classification."""

import pytest

from wxcallback.events import (
    ClickEvent,
    LocationEvent,
    MassSendJobFinishEvent,
    ScanEvent,
    SubscribeEvent,
    TemplateSendJobFinishEvent,
    UnknownEvent,
    UnsubscribeEvent,
    ViewEvent,
)
from wxcallback.messages import (
    ImageMessage,
    LinkMessage,
    LocationMessage,
    MiniProgramPageMessage,
    ShortVideoMessage,
    TextMessage,
    UnknownMessage,
    VideoMessage,
    VoiceMessage,
)
from wxcallback.parser import MessageParser, parse_message, parse_raw_envelope
from wxcallback.types import EmptyPayloadError, ParseError
from .test_vectors import TEXT_XML, SUBSCRIBE_XML


def envelope(msg_type: str, body: str = "") -> str:
    """Wrap fields in a callback envelope."""
    return (
        "<xml>"
        "<ToUserName><![CDATA[toUser]]></ToUserName>"
        "<FromUserName><![CDATA[fromUser]]></FromUserName>"
        "<CreateTime>1234567890</CreateTime>"
        f"<MsgType><![CDATA[{msg_type}]]></MsgType>"
        f"{body}"
        "</xml>"
    )


def event(name: str, body: str = "") -> str:
    return envelope("event", f"<Event><![CDATA[{name}]]></Event>{body}")


class TestEmptyAndMalformed:
    """Test input rejection."""

    @pytest.mark.parametrize("data", [None, b"", ""])
    def test_empty_payload(self, data):
        """Empty input fails before any XML parsing."""
        with pytest.raises(EmptyPayloadError):
            parse_message(data)

    def test_malformed_xml_keeps_raw_bytes(self):
        """Malformed XML raises ParseError carrying the original bytes."""
        data = b"<xml><MsgType>text</xml>"
        with pytest.raises(ParseError) as exc_info:
            parse_message(data)
        assert exc_info.value.raw_data == data

    def test_wrong_root_element(self):
        """Documents without an <xml> root are rejected."""
        with pytest.raises(ParseError):
            parse_message("<message><MsgType>text</MsgType></message>")

    def test_invalid_create_time(self):
        """A non-numeric CreateTime is a parse error."""
        data = TEXT_XML.replace("1409659813", "yesterday")
        with pytest.raises(ParseError):
            parse_message(data)


class TestMessages:
    """Test message classification."""

    def test_text_message(self):
        """Text messages carry their content and common fields."""
        msg = parse_message(TEXT_XML)
        assert isinstance(msg, TextMessage)
        assert msg.content == "hello"
        assert msg.header.to_user == "gh_account"
        assert msg.header.from_user == "openid_user"
        assert msg.header.create_time == 1409659813
        assert msg.header.msg_type == "text"
        assert msg.header.msg_id == 1234567890123456

    def test_accepts_bytes(self):
        """Bytes input parses the same as str."""
        assert parse_message(TEXT_XML.encode()) == parse_message(TEXT_XML)

    def test_msg_type_case_insensitive(self):
        """MsgType is matched after lowercasing."""
        msg = parse_message(envelope("TEXT", "<Content>hi</Content>"))
        assert isinstance(msg, TextMessage)
        assert msg.header.msg_type == "text"

    def test_image_message(self):
        msg = parse_message(envelope("image", "<PicUrl>http://p/1.jpg</PicUrl><MediaId>m1</MediaId>"))
        assert isinstance(msg, ImageMessage)
        assert msg.pic_url == "http://p/1.jpg"
        assert msg.media_id == "m1"

    def test_voice_message(self):
        msg = parse_message(
            envelope("voice", "<MediaId>m2</MediaId><Format>amr</Format><Recognition>hi</Recognition>")
        )
        assert isinstance(msg, VoiceMessage)
        assert (msg.media_id, msg.format, msg.recognition) == ("m2", "amr", "hi")

    @pytest.mark.parametrize("msg_type,cls", [("video", VideoMessage), ("shortvideo", ShortVideoMessage)])
    def test_video_messages(self, msg_type: str, cls):
        msg = parse_message(envelope(msg_type, "<MediaId>m3</MediaId><ThumbMediaId>t3</ThumbMediaId>"))
        assert isinstance(msg, cls)
        assert msg.media_id == "m3"
        assert msg.thumb_media_id == "t3"

    def test_location_message(self):
        """Coordinates parse to floats and scale to int."""
        msg = parse_message(
            envelope(
                "location",
                "<Location_X>23.134521</Location_X><Location_Y>113.358803</Location_Y>"
                "<Scale>20</Scale><Label><![CDATA[Somewhere]]></Label>",
            )
        )
        assert isinstance(msg, LocationMessage)
        assert msg.location == (23.134521, 113.358803)
        assert msg.scale == 20
        assert msg.label == "Somewhere"

    def test_link_message(self):
        msg = parse_message(
            envelope("link", "<Title>t</Title><Description>d</Description><Url>http://u</Url>")
        )
        assert isinstance(msg, LinkMessage)
        assert (msg.title, msg.description, msg.url) == ("t", "d", "http://u")

    def test_mini_program_page_message(self):
        msg = parse_message(
            envelope(
                "miniprogrampage",
                "<AppId>wxapp</AppId><Title>card</Title><PagePath>pages/index</PagePath>"
                "<ThumbUrl>http://thumb</ThumbUrl><ThumbMediaId>tm</ThumbMediaId>",
            )
        )
        assert isinstance(msg, MiniProgramPageMessage)
        assert msg.app_id == "wxapp"
        assert msg.page_path == "pages/index"
        assert msg.thumb_media_id == "tm"

    def test_unknown_message_type(self):
        """Unrecognized types degrade to UnknownMessage."""
        msg = parse_message(envelope("bogus", "<MsgId>42</MsgId>"))
        assert isinstance(msg, UnknownMessage)
        assert msg.header.msg_type == "bogus"
        assert msg.header.msg_id == 42
        assert msg.header.from_user == "fromUser"

    def test_raw_envelope_attached(self):
        """Typed messages keep the raw envelope for extra fields."""
        msg = parse_message(envelope("text", "<Content>hi</Content><Extra>x</Extra>"))
        assert msg.raw is not None
        assert msg.raw.content == "hi"


class TestEvents:
    """Test event classification."""

    def test_subscribe_event(self):
        """Subscribe events carry the event key."""
        evt = parse_message(SUBSCRIBE_XML)
        assert isinstance(evt, SubscribeEvent)
        assert evt.event_key == "k"
        assert evt.header.msg_type == "event"

    def test_subscribe_with_ticket(self):
        evt = parse_message(event("subscribe", "<EventKey>qrscene_1</EventKey><Ticket>TICKET</Ticket>"))
        assert isinstance(evt, SubscribeEvent)
        assert evt.ticket == "TICKET"

    def test_unsubscribe_event(self):
        assert isinstance(parse_message(event("unsubscribe")), UnsubscribeEvent)

    def test_scan_event(self):
        evt = parse_message(event("SCAN", "<EventKey>123</EventKey><Ticket>T</Ticket>"))
        assert isinstance(evt, ScanEvent)
        assert (evt.event_key, evt.ticket) == ("123", "T")

    def test_location_event(self):
        evt = parse_message(
            event(
                "LOCATION",
                "<Latitude>23.137466</Latitude><Longitude>113.352425</Longitude><Precision>119.385040</Precision>",
            )
        )
        assert isinstance(evt, LocationEvent)
        assert evt.latitude == pytest.approx(23.137466)
        assert evt.longitude == pytest.approx(113.352425)
        assert evt.precision == pytest.approx(119.38504)

    def test_click_event(self):
        evt = parse_message(event("CLICK", "<EventKey>MENU_KEY</EventKey>"))
        assert isinstance(evt, ClickEvent)
        assert evt.event_key == "MENU_KEY"

    def test_view_event(self):
        evt = parse_message(event("VIEW", "<EventKey>http://example.com</EventKey>"))
        assert isinstance(evt, ViewEvent)
        assert evt.event_key == "http://example.com"

    def test_mass_send_job_finish_event(self):
        evt = parse_message(
            event(
                "MASSSENDJOBFINISH",
                "<MsgID>1988</MsgID><Status>send success</Status><TotalCount>100</TotalCount>"
                "<FilterCount>80</FilterCount><SentCount>75</SentCount><ErrorCount>5</ErrorCount>",
            )
        )
        assert isinstance(evt, MassSendJobFinishEvent)
        assert evt.header.msg_id == 1988
        assert evt.status == "send success"
        assert (evt.total_count, evt.filter_count, evt.sent_count, evt.error_count) == (100, 80, 75, 5)

    def test_template_send_job_finish_event(self):
        evt = parse_message(event("TEMPLATESENDJOBFINISH", "<MsgID>200163836</MsgID><Status>success</Status>"))
        assert isinstance(evt, TemplateSendJobFinishEvent)
        assert evt.header.msg_id == 200163836
        assert evt.status == "success"

    def test_event_names_are_case_sensitive(self):
        """Event names match literally; "click" is not CLICK."""
        evt = parse_message(event("click", "<EventKey>K</EventKey>"))
        assert isinstance(evt, UnknownEvent)
        assert evt.event == "click"

    def test_unknown_event(self):
        """Unrecognized events keep the raw event name."""
        evt = parse_message(event("user_get_card"))
        assert isinstance(evt, UnknownEvent)
        assert evt.event == "user_get_card"
        assert evt.header.from_user == "fromUser"

    def test_event_field_without_event_msg_type(self):
        """An Event element alone is enough to classify as an event."""
        evt = parse_message(envelope("text", "<Event>CLICK</Event><EventKey>K</EventKey>"))
        assert isinstance(evt, ClickEvent)


class TestRawEnvelope:
    """Test untyped envelope parsing."""

    def test_missing_fields_are_empty(self):
        raw = parse_raw_envelope(envelope("text"))
        assert raw.msg_type == "text"
        assert raw.content == ""
        assert raw.event == ""

    def test_parser_object(self):
        """MessageParser delegates to parse_message."""
        assert MessageParser().parse(TEXT_XML) == parse_message(TEXT_XML)

    def test_event_name_whitespace_stripped(self):
        """Whitespace around the event name does not affect classification."""
        evt = parse_message(event("\n  CLICK  ", "<EventKey>K</EventKey>"))
        assert isinstance(evt, ClickEvent)
        assert evt.event == "CLICK"

    def test_blank_event_element_is_not_an_event(self):
        """A whitespace-only Event element leaves a regular message as-is."""
        msg = parse_message(envelope("text", "<Content>hi</Content><Event> </Event>"))
        assert isinstance(msg, TextMessage)
        assert msg.content == "hi"

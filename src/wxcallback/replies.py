"""
Outbound reply types and their XML encoding.

A reply addresses the user who sent the inbound message, so `to_user` is
the inbound `from_user` and vice versa. `create_reply` does the swap.
"""

import time
from dataclasses import dataclass, field, fields
from typing import Any, Callable, ClassVar, Union

from .events import Event
from .messages import Message
from .types import UnsupportedReplyError


def _now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class TextReply:
    type: ClassVar[str] = "text"
    to_user: str
    from_user: str
    content: str = ""
    create_time: int = field(default_factory=_now)


@dataclass(frozen=True)
class ImageReply:
    type: ClassVar[str] = "image"
    to_user: str
    from_user: str
    media_id: str = ""
    create_time: int = field(default_factory=_now)


@dataclass(frozen=True)
class VoiceReply:
    type: ClassVar[str] = "voice"
    to_user: str
    from_user: str
    media_id: str = ""
    create_time: int = field(default_factory=_now)


@dataclass(frozen=True)
class VideoReply:
    """Video reply; title and description are optional."""
    type: ClassVar[str] = "video"
    to_user: str
    from_user: str
    media_id: str = ""
    title: str = ""
    description: str = ""
    create_time: int = field(default_factory=_now)


@dataclass(frozen=True)
class MusicReply:
    """Music reply; only the thumbnail is required by the platform."""
    type: ClassVar[str] = "music"
    to_user: str
    from_user: str
    thumb_media_id: str = ""
    title: str = ""
    description: str = ""
    music_url: str = ""
    hq_music_url: str = ""
    create_time: int = field(default_factory=_now)


@dataclass(frozen=True)
class Article:
    """One card of a news reply."""
    title: str = ""
    description: str = ""
    pic_url: str = ""
    url: str = ""


@dataclass(frozen=True)
class NewsReply:
    """News reply. Cards are shown in list order."""
    type: ClassVar[str] = "news"
    to_user: str
    from_user: str
    articles: tuple[Article, ...] = ()
    create_time: int = field(default_factory=_now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "articles", tuple(self.articles))


Reply = Union[TextReply, ImageReply, VoiceReply, VideoReply, MusicReply, NewsReply]

REPLY_TYPES = {
    cls.type: cls
    for cls in (TextReply, ImageReply, VoiceReply, VideoReply, MusicReply, NewsReply)
}


def _cdata(value: str) -> str:
    # "]]>" cannot appear inside a CDATA section; split it across two
    return "<![CDATA[" + str(value).replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _element(tag: str, value: str) -> str:
    return f"<{tag}>{_cdata(value)}</{tag}>"


def _optional(tag: str, value: str) -> str:
    return _element(tag, value) if value else ""


def _render_text(reply: TextReply) -> str:
    return _element("Content", reply.content)


def _render_image(reply: ImageReply) -> str:
    return f"<Image>{_element('MediaId', reply.media_id)}</Image>"


def _render_voice(reply: VoiceReply) -> str:
    return f"<Voice>{_element('MediaId', reply.media_id)}</Voice>"


def _render_video(reply: VideoReply) -> str:
    return (
        "<Video>"
        + _element("MediaId", reply.media_id)
        + _optional("Title", reply.title)
        + _optional("Description", reply.description)
        + "</Video>"
    )


def _render_music(reply: MusicReply) -> str:
    return (
        "<Music>"
        + _optional("Title", reply.title)
        + _optional("Description", reply.description)
        + _optional("MusicUrl", reply.music_url)
        + _optional("HQMusicUrl", reply.hq_music_url)
        + _element("ThumbMediaId", reply.thumb_media_id)
        + "</Music>"
    )


def _render_news(reply: NewsReply) -> str:
    items = "".join(
        "<item>"
        + _element("Title", article.title)
        + _element("Description", article.description)
        + _element("PicUrl", article.pic_url)
        + _element("Url", article.url)
        + "</item>"
        for article in reply.articles
    )
    return f"<ArticleCount>{len(reply.articles)}</ArticleCount><Articles>{items}</Articles>"


_RENDERERS: dict[type, Callable[[Any], str]] = {
    TextReply: _render_text,
    ImageReply: _render_image,
    VoiceReply: _render_voice,
    VideoReply: _render_video,
    MusicReply: _render_music,
    NewsReply: _render_news,
}


def render_reply(reply: Reply) -> str:
    """
    Encode a reply as callback response XML.

    Args:
        reply: One of the reply variants

    Returns:
        XML document with an <xml> root

    Raises:
        UnsupportedReplyError: If reply is not a known reply variant
    """
    renderer = _RENDERERS.get(type(reply))
    if renderer is None:
        raise UnsupportedReplyError(type(reply).__name__)

    return (
        "<xml>"
        + _element("ToUserName", reply.to_user)
        + _element("FromUserName", reply.from_user)
        + f"<CreateTime>{int(reply.create_time)}</CreateTime>"
        + _element("MsgType", reply.type)
        + renderer(reply)
        + "</xml>"
    )


def create_reply(message: Union[Message, Event], reply_type: str = "text", **values: Any) -> Reply:
    """
    Create a reply addressed back to the sender of message.

    Args:
        message: Inbound message or event being answered
        reply_type: Reply `MsgType` ("text", "image", "voice", "video", "music", "news")
        **values: Variant fields, e.g. content="hi" or articles=[...]

    Returns:
        Reply with sender and recipient swapped

    Raises:
        UnsupportedReplyError: If reply_type is not a known reply type
        ValueError: If a field does not belong to the reply variant
    """
    cls = REPLY_TYPES.get(reply_type)
    if cls is None:
        raise UnsupportedReplyError(reply_type)
    allowed = {f.name for f in fields(cls)} - {"to_user", "from_user"}
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ValueError(f"{cls.__name__} has no field(s): {', '.join(unknown)}")
    return cls(
        to_user=message.header.from_user,
        from_user=message.header.to_user,
        **values,
    )

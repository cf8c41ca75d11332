"""Message elements, their constructors and forwarded-message cards."""

from __future__ import annotations

import enum
import io
import json
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, BinaryIO, ClassVar, Sequence

from lagrangekit import audio
from lagrangekit.hashing import compute_md5_and_sha1_and_length, rand_u32
from lagrangekit.image import image_resolve
from lagrangekit.ioutil import new_uuid

_MASK32 = 0xFFFFFFFF
_DEFAULT_THUMB_WIDTH = 1920
_DEFAULT_THUMB_HEIGHT = 1080
_DICE_FACE_ID = 358
_FINGER_GUESSING_FACE_ID = 359


class ElementType(enum.IntEnum):
    """The kinds of message element."""

    TEXT = 0
    IMAGE = 1
    FACE = 2
    AT = 3
    REPLY = 4
    SERVICE = 5
    FORWARD = 6
    FILE = 7
    VOICE = 8
    VIDEO = 9
    LIGHT_APP = 10
    RED_BAG = 11
    MARKET_FACE = 12


class AtType(enum.IntEnum):
    """Whom a mention addresses."""

    GROUP_MEMBER = 0


class FingerGuessingType(enum.IntEnum):
    """The hands of rock-paper-scissors."""

    PAPER = 1
    SCISSORS = 2
    ROCK = 3

    def __str__(self) -> str:
        return _FINGER_NAMES[self]


_FINGER_NAMES = {
    FingerGuessingType.ROCK: "石头",
    FingerGuessingType.SCISSORS: "剪刀",
    FingerGuessingType.PAPER: "布",
}


class _Element:
    """Common base giving every element its kind."""

    element_type: ClassVar[ElementType]

    @property
    def type(self) -> ElementType:
        return self.element_type


@dataclass
class TextElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.TEXT

    content: str = ""


@dataclass
class AtElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.AT

    target_uin: int = 0
    target_uid: str = ""
    display: str = ""
    sub_type: AtType = AtType.GROUP_MEMBER


@dataclass
class FaceElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.FACE

    face_id: int = 0
    result_id: int = 0
    is_large_face: bool = False


@dataclass
class ReplyElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.REPLY

    reply_seq: int = 0
    sender_uin: int = 0
    sender_uid: str = ""
    group_uin: int = 0
    time: int = 0
    elements: list = field(default_factory=list)


@dataclass
class VoiceElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.VOICE

    name: str = ""
    uuid: str = ""
    size: int = 0
    url: str = ""
    md5: bytes = b""
    sha1: bytes = b""
    node: Any = None
    msg_info: Any = None
    compat: bytes = b""
    duration: int = 0
    stream: BinaryIO | None = None
    summary: str = ""


@dataclass
class ImageElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.IMAGE

    image_id: str = ""
    file_uuid: str = ""
    size: int = 0
    width: int = 0
    height: int = 0
    url: str = ""
    sub_type: int = 0
    effect_id: int = 0
    flash: bool = False
    summary: str = ""
    md5: bytes = b""
    is_group: bool = False
    sha1: bytes = b""
    msg_info: Any = None
    stream: BinaryIO | None = None
    compat_face: Any = None
    compat_image: Any = None


@dataclass
class FileElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.FILE

    file_size: int = 0
    file_name: str = ""
    file_md5: bytes = b""
    file_url: str = ""
    file_id: str = ""
    file_uuid: str = ""
    file_hash: str = ""
    file_stream: BinaryIO | None = None
    file_sha1: bytes = b""


@dataclass
class VideoThumb:
    stream: BinaryIO | None = None
    size: int = 0
    md5: bytes = b""
    sha1: bytes = b""
    width: int = 0
    height: int = 0


@dataclass
class ShortVideoElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.VIDEO

    name: str = ""
    uuid: str = ""
    size: int = 0
    url: str = ""
    duration: int = 0
    node: Any = None
    thumb: VideoThumb | None = None
    summary: str = ""
    md5: bytes = b""
    sha1: bytes = b""
    stream: BinaryIO | None = None
    msg_info: Any = None
    compat: Any = None


@dataclass
class LightAppElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.LIGHT_APP

    app_name: str = ""
    content: str = ""


@dataclass
class XMLElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.SERVICE

    service_id: int = 35
    content: str = ""


@dataclass
class ForwardNode:
    group_id: int = 0
    sender_id: int = 0
    sender_name: str = ""
    time: int = 0
    message: list = field(default_factory=list)


@dataclass
class MarketFaceElement(_Element):
    element_type: ClassVar[ElementType] = ElementType.MARKET_FACE

    summary: str = ""
    item_type: int = 0
    face_info: int = 0
    face_id: bytes = b""
    tab_id: int = 0
    sub_type: int = 0
    encrypt_key: bytes = b""
    media_type: int = 0
    magic_value: str = ""

    def face_id_string(self) -> str:
        """The face id as text for dynamic faces, otherwise as lower-case hex."""
        if self.media_type == 2:
            return self.face_id.decode("utf-8", "replace")
        return self.face_id.hex()


_LABELS: dict[type, str] = {
    ImageElement: "[图片]",
    ReplyElement: "[回复]",
    FaceElement: "[表情]",
    VoiceElement: "[语音]",
    ShortVideoElement: "[视频]",
    LightAppElement: "[卡片消息]",
    MarketFaceElement: "[魔法表情]",
}


def _readable(elements: Sequence[Any]) -> str:
    parts = []
    for element in elements:
        if isinstance(element, TextElement):
            parts.append(element.content)
        elif isinstance(element, AtElement):
            parts.append(element.display)
        elif isinstance(element, ForwardMessage):
            parts.append("[转发消息]")
        else:
            parts.append(_LABELS.get(type(element), "[暂不支持该消息类型]"))
    return "".join(parts)


_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _compact_json(obj: Any) -> str:
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in _JSON_ESCAPES:
        text = text.replace(raw, escaped)
    return text


@dataclass
class ForwardMessage(_Element):
    element_type: ClassVar[ElementType] = ElementType.FORWARD

    is_group: bool = False
    self_id: int = 0
    res_id: str = ""
    nodes: list[ForwardNode] = field(default_factory=list)

    def _source(self) -> str:
        if not self.nodes:
            return "聊天记录"
        names: list[str] = []
        contains_self = False
        for node in self.nodes:
            if node.sender_id == self.self_id and self.self_id > 0:
                contains_self = True
            if node.sender_name not in names:
                names.append(node.sender_name)
        if not contains_self:
            return "群聊的聊天记录"
        return "和".join(names) + "的聊天记录"

    def light_app_content(self) -> str:
        """Return the JSON card that shows this forwarded message."""
        file_id = new_uuid()
        extra = _compact_json({"filename": file_id, "tsum": len(self.nodes)})
        if self.nodes:
            news = [{"text": f"{node.sender_name}: {_readable(node.message)}"}
                    for node in self.nodes]
        else:
            news = [{"text": "转发消息"}]
        content = {
            "app": "com.tencent.multimsg",
            "config": {"autosize": 1, "forward": 1, "round": 1,
                       "type": "normal", "width": 300},
            "desc": "[聊天记录]",
            "extra": extra,
            "meta": {"detail": {
                "news": news,
                "resid": self.res_id,
                "source": self._source(),
                "summary": f"查看{len(self.nodes)}条转发消息",
                "uniseq": file_id,
            }},
            "prompt": "[聊天记录]",
            "ver": "0.0.0.5",
            "view": "contact",
        }
        return _compact_json(content)

    def to_light_app(self) -> LightAppElement:
        """Return the card for this forwarded message as a light app element."""
        return new_light_app(self.light_app_content())


@dataclass
class MultiTitle:
    color: str = ""
    size: int = 0
    text: str = ""


@dataclass
class MultiSummary:
    color: str = ""
    text: str = ""


@dataclass
class MultiItem:
    layout: int = 0
    titles: list[MultiTitle] = field(default_factory=list)
    summary: MultiSummary = field(default_factory=MultiSummary)


@dataclass
class MultiSource:
    name: str = ""


def _int_attr(el: ET.Element, name: str, unsigned: bool = False) -> int:
    raw = el.get(name, "").strip()
    if not raw:
        return 0
    try:
        value = int(raw, 10)
    except ValueError as exc:
        raise ValueError(f"invalid integer in attribute {name}: {raw!r}") from exc
    if unsigned and value < 0:
        raise ValueError(f"negative value in attribute {name}: {raw!r}")
    return value


def _chardata(el: ET.Element) -> str:
    parts = [el.text or ""]
    parts.extend(child.tail or "" for child in el)
    return "".join(parts)


@dataclass
class MultiMessage:
    """The XML card that points at a stored forwarded message."""

    service_id: int = 0
    template_id: int = 0
    action: str = ""
    brief: str = ""
    file_name: str = ""
    res_id: str = ""
    total: int = 0
    flag: int = 0
    item: MultiItem = field(default_factory=MultiItem)
    source: MultiSource = field(default_factory=MultiSource)

    @classmethod
    def parse(cls, data: bytes | str) -> MultiMessage:
        """Parse a ``<msg>`` document; raises ValueError if it is not one."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as exc:
            raise ValueError(f"malformed XML: {exc}") from exc
        if root.tag != "msg":
            raise ValueError(f"expected element <msg> but have <{root.tag}>")

        item = MultiItem()
        item_el = root.find("item")
        if item_el is not None:
            item.layout = _int_attr(item_el, "layout")
            item.titles = [
                MultiTitle(t.get("color", ""), _int_attr(t, "size"), _chardata(t))
                for t in item_el.findall("title")
            ]
            summary_el = item_el.find("summary")
            if summary_el is not None:
                item.summary = MultiSummary(summary_el.get("color", ""), _chardata(summary_el))

        source = MultiSource()
        source_el = root.find("source")
        if source_el is not None:
            source.name = source_el.get("name", "")

        return cls(
            service_id=_int_attr(root, "serviceID", unsigned=True),
            template_id=_int_attr(root, "templateID"),
            action=root.get("action", ""),
            brief=root.get("brief", ""),
            file_name=root.get("m_fileName", ""),
            res_id=root.get("m_resid", ""),
            total=_int_attr(root, "tSum"),
            flag=_int_attr(root, "flag"),
            item=item,
            source=source,
        )


def new_text(s: str) -> TextElement:
    return TextElement(content=s)


def new_at(target: int, display: str | None = None) -> AtElement:
    """Mention ``target``; uin 0 mentions everyone."""
    if display is None:
        display = "@全体成员" if target == 0 else f"@{target}"
    return AtElement(target_uin=target, display=display)


def new_group_reply(m: Any) -> ReplyElement:
    return ReplyElement(reply_seq=m.id, sender_uin=m.sender.uin, time=m.time,
                        elements=m.elements)


def new_private_reply(m: Any) -> ReplyElement:
    return ReplyElement(reply_seq=m.id, sender_uin=m.sender.uin, time=m.time,
                        elements=m.elements)


def new_record(data: bytes, summary: str = "") -> VoiceElement:
    return new_stream_record(io.BytesIO(data), summary)


def new_stream_record(r: BinaryIO, summary: str = "") -> VoiceElement:
    """A voice element whose duration comes from the audio header if known."""
    md5, sha1, length = compute_md5_and_sha1_and_length(r)
    try:
        duration = int(audio.decode(r).time)
    except ValueError:
        duration = length
    return VoiceElement(size=length & _MASK32, summary=summary, stream=r, md5=md5,
                        sha1=sha1, duration=duration & _MASK32)


def new_file_record(path: str | os.PathLike, summary: str = "") -> VoiceElement:
    return new_stream_record(open(path, "rb"), summary)


def new_image(data: bytes, summary: str = "") -> ImageElement:
    return new_stream_image(io.BytesIO(data), summary)


def new_stream_image(r: BinaryIO, summary: str = "") -> ImageElement:
    md5, sha1, length = compute_md5_and_sha1_and_length(r)
    return ImageElement(size=length & _MASK32, summary=summary, stream=r, md5=md5, sha1=sha1)


def new_file_image(path: str | os.PathLike, summary: str = "") -> ImageElement:
    return new_stream_image(open(path, "rb"), summary)


def new_video(data: bytes, thumb: bytes, summary: str = "") -> ShortVideoElement:
    return new_stream_video(io.BytesIO(data), io.BytesIO(thumb), summary)


def new_stream_video(r: BinaryIO, thumb: BinaryIO, summary: str = "") -> ShortVideoElement:
    md5, sha1, length = compute_md5_and_sha1_and_length(r)
    return ShortVideoElement(size=length & _MASK32, thumb=new_video_thumb(thumb),
                             summary=summary, md5=md5, sha1=sha1, stream=r)


def new_file_video(path: str | os.PathLike, thumb: bytes, summary: str = "") -> ShortVideoElement:
    return new_stream_video(open(path, "rb"), io.BytesIO(thumb), summary)


def new_video_thumb(r: BinaryIO) -> VideoThumb:
    """A thumbnail sized from its image header, 1920x1080 if unreadable."""
    width, height = _DEFAULT_THUMB_WIDTH, _DEFAULT_THUMB_HEIGHT
    md5, sha1, size = compute_md5_and_sha1_and_length(r)
    try:
        _, image_size = image_resolve(r)
    except (ValueError, OSError):
        pass
    else:
        width, height = image_size.width, image_size.height
    return VideoThumb(stream=r, size=size & _MASK32, md5=md5, sha1=sha1,
                      width=width, height=height)


def new_file(data: bytes, file_name: str) -> FileElement:
    return new_stream_file(io.BytesIO(data), file_name)


def new_stream_file(r: BinaryIO, file_name: str) -> FileElement:
    md5, sha1, length = compute_md5_and_sha1_and_length(r)
    return FileElement(file_name=file_name, file_size=length, file_stream=r,
                       file_md5=md5, file_sha1=sha1)


def new_local_file(path: str | os.PathLike, name: str | None = None) -> FileElement:
    """A file element for a local file, named after it unless ``name`` is given."""
    stream = open(path, "rb")
    return new_stream_file(stream, os.path.basename(path) if name is None else name)


def new_light_app(content: str) -> LightAppElement:
    app_name = ""
    try:
        parsed = json.loads(content)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict) and isinstance(parsed.get("app"), str):
        app_name = parsed["app"]
    return LightAppElement(app_name=app_name, content=content)


def new_xml(content: str) -> XMLElement:
    return XMLElement(service_id=35, content=content)


def new_xml_with_id(service_id: int, content: str) -> XMLElement:
    return XMLElement(service_id=service_id, content=content)


def new_forward(resid: str, nodes: list[ForwardNode]) -> ForwardMessage:
    return ForwardMessage(res_id=resid, nodes=list(nodes))


def new_forward_with_res_id(resid: str) -> ForwardMessage:
    return ForwardMessage(res_id=resid)


def new_forward_with_nodes(nodes: list[ForwardNode]) -> ForwardMessage:
    return ForwardMessage(nodes=list(nodes))


def new_face(face_id: int) -> FaceElement:
    return FaceElement(face_id=face_id)


def new_market_face(emoji_pack_id: int, emoji_id: bytes, key: str, summary: str,
                    value: str) -> MarketFaceElement:
    """A market face; ``key`` is the key fetched for ``emoji_id``."""
    return MarketFaceElement(summary=summary, item_type=6, face_id=bytes(emoji_id),
                             tab_id=emoji_pack_id, sub_type=3,
                             encrypt_key=key.encode("utf-8"), media_type=0,
                             magic_value=value)


def new_dice(value: int) -> FaceElement:
    """A dice face; values above six are replaced by a random one."""
    if value > 6:
        value = rand_u32() % 3 + 1
    return FaceElement(face_id=_DICE_FACE_ID, result_id=value, is_large_face=True)


def new_finger_guessing(value: FingerGuessingType) -> FaceElement:
    return FaceElement(face_id=_FINGER_GUESSING_FACE_ID, result_id=int(value),
                       is_large_face=True)
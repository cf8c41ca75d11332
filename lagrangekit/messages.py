"""Received and outgoing messages, their senders and readable summaries."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from lagrangekit.elements import (
    AtElement,
    ElementType,
    FaceElement,
    ForwardMessage,
    ImageElement,
    LightAppElement,
    MarketFaceElement,
    ReplyElement,
    ShortVideoElement,
    TextElement,
    VoiceElement,
)

_UNSUPPORTED = "[暂不支持该消息类型]"

_PLACEHOLDERS: dict[type, str] = {
    ImageElement: "[图片]",
    ReplyElement: "[回复]",
    FaceElement: "[表情]",
    VoiceElement: "[语音]",
    ShortVideoElement: "[视频]",
    LightAppElement: "[卡片消息]",
    ForwardMessage: "[转发消息]",
    MarketFaceElement: "[魔法表情]",
}


def to_readable_string_element(element: Any) -> str:
    """Return the text of a text or mention element, or a placeholder for others."""
    if isinstance(element, TextElement):
        return element.content
    if isinstance(element, AtElement):
        return element.display
    return _PLACEHOLDERS.get(type(element), _UNSUPPORTED)


def to_readable_string(elements: Iterable[Any]) -> str:
    """Join the readable forms of all ``elements``."""
    return "".join(to_readable_string_element(e) for e in elements)


def elements_has_type(elements: Iterable[Any], element_type: ElementType) -> bool:
    """Tell whether any of ``elements`` is of ``element_type``."""
    return any(e.type == element_type for e in elements)


def _texts(elements: Iterable[Any]) -> list[str]:
    return [to_readable_string_element(e) for e in elements]


@dataclass
class Sender:
    """The author of a received message."""

    uin: int = 0
    uid: str = ""
    nickname: str = ""
    card_name: str = ""
    is_friend: bool = False


@dataclass
class PrivateMessage:
    """A message received from a friend."""

    id: int = 0
    internal_id: int = 0
    client_seq: int = 0
    self_uin: int = 0
    target: int = 0
    time: int = 0
    sender: Optional[Sender] = None
    elements: list = field(default_factory=list)

    def to_string(self) -> str:
        """Return the message as readable text."""
        return to_readable_string(self.elements)

    def chat(self) -> int:
        """Return the message sequence number."""
        return self.id

    def texts(self) -> list[str]:
        """Return the readable form of each element."""
        return _texts(self.elements)


@dataclass
class TempMessage:
    """A temporary-session message received through a group."""

    id: int = 0
    group_uin: int = 0
    group_name: str = ""
    self_uin: int = 0
    sender: Optional[Sender] = None
    elements: list = field(default_factory=list)

    def to_string(self) -> str:
        """Return the message as readable text."""
        return to_readable_string(self.elements)

    def chat(self) -> int:
        """Return the message sequence number."""
        return self.id

    def texts(self) -> list[str]:
        """Return the readable form of each element."""
        return _texts(self.elements)


@dataclass
class GroupMessage:
    """A message received in a group."""

    id: int = 0
    internal_id: int = 0
    group_uin: int = 0
    group_name: str = ""
    sender: Optional[Sender] = None
    time: int = 0
    elements: list = field(default_factory=list)
    original_object: Any = None

    def to_string(self) -> str:
        """Return the message as readable text."""
        return to_readable_string(self.elements)

    def chat(self) -> int:
        """Return the message sequence number."""
        return self.id

    def texts(self) -> list[str]:
        """Return the readable form of each element."""
        return _texts(self.elements)


@dataclass
class SendingMessage:
    """A message being put together for sending."""

    elements: list = field(default_factory=list)

    def append(self, element: Any) -> SendingMessage:
        """Add ``element`` unless it is None; returns this message."""
        if element is not None:
            self.elements.append(element)
        return self

    def first_or_none(self, predicate: Callable[[Any], bool]) -> Any:
        """Return the first element matching ``predicate``, or None."""
        return next((e for e in self.elements if predicate(e)), None)


@dataclass
class GroupEssenceMessage:
    """A group message marked as essence."""

    operator_uin: int = 0
    operator_uid: str = ""
    operator_time: int = 0
    can_remove: bool = False
    message: Optional[GroupMessage] = None


class SourceType(enum.IntEnum):
    """Where a message came from."""

    PRIVATE = 1
    GROUP = 2

    def __str__(self) -> str:
        return _SOURCE_NAMES.get(self, "unknown")


_SOURCE_NAMES = {SourceType.PRIVATE: "私聊", SourceType.GROUP: "群聊"}


@dataclass
class Source:
    """The origin of a message: its kind and the group or account number."""

    source_type: SourceType
    primary_id: int = 0
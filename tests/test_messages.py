import pytest

from lagrangekit.elements import (
    ElementType,
    ForwardMessage,
    ImageElement,
    LightAppElement,
    MarketFaceElement,
    ShortVideoElement,
    VoiceElement,
    XMLElement,
    new_at,
    new_face,
    new_group_reply,
    new_text,
)
from lagrangekit.messages import (
    GroupEssenceMessage,
    GroupMessage,
    PrivateMessage,
    Sender,
    SendingMessage,
    Source,
    SourceType,
    TempMessage,
    elements_has_type,
    to_readable_string,
    to_readable_string_element,
)


@pytest.mark.parametrize(
    "element, expected",
    [
        (ImageElement(), "[图片]"),
        (new_face(1), "[表情]"),
        (VoiceElement(), "[语音]"),
        (ShortVideoElement(), "[视频]"),
        (LightAppElement(), "[卡片消息]"),
        (ForwardMessage(), "[转发消息]"),
        (MarketFaceElement(), "[魔法表情]"),
        (XMLElement(), "[暂不支持该消息类型]"),
    ],
)
def test_placeholders(element, expected):
    assert to_readable_string_element(element) == expected


def test_text_and_at_are_literal():
    assert to_readable_string_element(new_text("hello")) == "hello"
    assert to_readable_string_element(new_at(0)) == "@全体成员"


def test_to_readable_string_joins():
    elements = [new_text("hi "), new_at(42, "@bob"), ImageElement()]
    assert to_readable_string(elements) == "hi @bob[图片]"
    assert to_readable_string([]) == ""


def test_group_message_methods():
    elements = [new_text("a"), new_face(5)]
    msg = GroupMessage(id=7, group_uin=100, sender=Sender(uin=9), elements=elements)
    assert msg.to_string() == "a[表情]"
    assert msg.chat() == 7
    assert msg.texts() == ["a", "[表情]"]


def test_private_and_temp_messages():
    priv = PrivateMessage(id=3, elements=[new_text("x")])
    temp = TempMessage(id=4, elements=[new_text("y"), VoiceElement()])
    assert priv.to_string() == "x"
    assert priv.chat() == 3
    assert temp.texts() == ["y", "[语音]"]
    assert temp.chat() == 4


def test_texts_length_matches_elements():
    elements = [new_text("1"), ImageElement(), new_at(5)]
    msg = PrivateMessage(elements=elements)
    assert len(msg.texts()) == len(elements)
    assert "".join(msg.texts()) == msg.to_string()


def test_reply_from_group_message():
    msg = GroupMessage(id=11, sender=Sender(uin=22), time=33, elements=[new_text("q")])
    reply = new_group_reply(msg)
    assert (reply.reply_seq, reply.sender_uin, reply.time) == (11, 22, 33)
    assert to_readable_string_element(reply) == "[回复]"


def test_sending_message_append_skips_none():
    msg = SendingMessage()
    result = msg.append(new_text("a")).append(None).append(ImageElement())
    assert result is msg
    assert len(msg.elements) == 2


def test_first_or_none():
    image = ImageElement()
    msg = SendingMessage().append(new_text("a")).append(image)
    assert msg.first_or_none(lambda e: e.type == ElementType.IMAGE) is image
    assert msg.first_or_none(lambda e: e.type == ElementType.VOICE) is None


def test_elements_has_type():
    elements = [new_text("a"), new_face(1)]
    assert elements_has_type(elements, ElementType.FACE)
    assert not elements_has_type(elements, ElementType.IMAGE)
    assert not elements_has_type([], ElementType.TEXT)


def test_source_type_names():
    assert str(SourceType.PRIVATE) == "私聊"
    assert str(SourceType.GROUP) == "群聊"
    assert SourceType(1) is SourceType.PRIVATE
    assert SourceType(2) is SourceType.GROUP
    with pytest.raises(ValueError):
        SourceType(3)


def test_source_and_essence():
    src = Source(SourceType.GROUP, 12345)
    assert src.source_type == SourceType.GROUP and src.primary_id == 12345
    msg = GroupMessage(id=1, elements=[new_text("z")])
    essence = GroupEssenceMessage(operator_uin=5, can_remove=True, message=msg)
    assert essence.message.to_string() == "z"
    assert essence.can_remove is True
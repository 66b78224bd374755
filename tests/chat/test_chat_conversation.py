from __future__ import annotations

import pytest

from fakes import FakeChatBackend
from taskora.chat.assistant import FallbackAssistant
from taskora.chat.service import SYSTEM_PROMPT, WELCOME, ChatConversation, ChatService
from taskora.core.exceptions import ServiceError, ValidationError


def test_conversation_starts_with_welcome():
    conversation = ChatConversation(FakeChatBackend())
    assert [(m.role, m.content) for m in conversation.messages] == [("assistant", WELCOME)]


def test_send_streams_and_records_reply():
    backend = FakeChatBackend(pieces=["Hi", "!"])
    conversation = ChatConversation(backend)

    assert list(conversation.send("hello")) == ["Hi", "!"]

    assert [(m.role, m.content) for m in conversation.messages[1:]] == [("user", "hello"), ("assistant", "Hi!")]
    assert backend.calls[0] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "hello"},
    ]
    assert not conversation.busy


def test_second_send_while_streaming_is_refused():
    conversation = ChatConversation(FakeChatBackend(pieces=["a", "b"]))
    stream = conversation.send("one")
    next(stream)

    with pytest.raises(ValidationError):
        conversation.send("two")

    list(stream)
    assert not conversation.busy


def test_empty_message_is_refused():
    conversation = ChatConversation(FakeChatBackend())
    with pytest.raises(ValidationError):
        conversation.send("   ")
    assert not conversation.busy


def test_failed_stream_releases_busy_and_drops_empty_reply():
    conversation = ChatConversation(FakeChatBackend(pieces=[], error=ServiceError("down")))
    with pytest.raises(ServiceError):
        list(conversation.send("hi"))

    assert not conversation.busy
    assert [m.role for m in conversation.messages] == ["assistant", "user"]


def test_service_keeps_one_conversation_per_user():
    service = ChatService(FakeChatBackend())
    assert service.conversation_for("u1") is service.conversation_for("u1")
    assert service.conversation_for("u1") is not service.conversation_for("u2")

    first = service.conversation_for("u1")
    service.reset("u1")
    assert service.conversation_for("u1") is not first


def test_fallback_assistant_answers_by_keyword():
    reply = "".join(FallbackAssistant().stream([{"role": "user", "content": "How does attendance tracking work?"}]))
    assert "10:00" in reply


def test_release_frees_a_stream_that_was_never_read():
    conversation = ChatConversation(FakeChatBackend())
    stream = conversation.send("hello")
    turn = conversation.active_turn
    stream.close()

    conversation.release(turn)

    assert not conversation.busy
    assert list(conversation.send("again")) == ["Hello", " there"]


def test_stale_release_keeps_the_newer_turn_busy():
    conversation = ChatConversation(FakeChatBackend(pieces=["a", "b"]))
    first = conversation.send("one")
    old_turn = conversation.active_turn
    list(first)

    second = conversation.send("two")
    next(second)
    conversation.release(old_turn)

    assert conversation.busy
    list(second)
    assert not conversation.busy

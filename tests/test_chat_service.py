"""Tests for the chat channel and song command detection."""

import pytest

from services.chat_service import ANONYMOUS, BOT_NAME, ChatService
from services.errors import InvalidMessageError


@pytest.fixture
def chat():
    return ChatService(retention=100, history_limit=20)


def test_starts_with_welcome_message(chat):
    messages = chat.recent()

    assert len(messages) == 1
    assert messages[0].user == BOT_NAME


class TestPost:
    def test_post_plain_message(self, chat):
        message, command = chat.post("ana", "  hello there  ")

        assert message.user == "ana"
        assert message.message == "hello there"
        assert command is None
        assert chat.recent()[-1] is message

    def test_blank_user_becomes_anonymous(self, chat):
        message, _ = chat.post("   ", "hi")

        assert message.user == ANONYMOUS

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_message_is_rejected(self, chat, text):
        with pytest.raises(InvalidMessageError):
            chat.post("ana", text)

    def test_music_keyword_without_command_gets_hint(self, chat):
        chat.post("ana", "can we play something else?")

        assert chat.recent()[-1].user == BOT_NAME
        assert "add Artist - Title" in chat.recent()[-1].message

    def test_command_does_not_add_hint(self, chat):
        _, command = chat.post("ana", "add Gorillaz - DARE")

        assert command is not None
        assert chat.recent()[-1].user == "ana"


class TestDetectCommand:
    @pytest.mark.parametrize(
        "text, artist, title",
        [
            ("add The Beatles - Hey Jude", "The Beatles", "Hey Jude"),
            ("PLAY Radiohead - Creep", "Radiohead", "Creep"),
            ("tocar Legião Urbana - Tempo Perdido", "Legião Urbana", "Tempo Perdido"),
            ("Nirvana - Lithium add", "Nirvana", "Lithium"),
            ("search Deftones - Digital Bath", "Deftones", "Digital Bath"),
            ("buscar Pitty-Admirável Chip Novo", "Pitty", "Admirável Chip Novo"),
        ],
    )
    def test_recognized_forms(self, chat, text, artist, title):
        command = chat.detect_command(text, "ana")

        assert command.artist == artist
        assert command.title == title
        assert command.requested_by == "ana"

    @pytest.mark.parametrize("text", ["hello", "add something", "The Beatles - Hey Jude"])
    def test_non_commands(self, chat, text):
        assert chat.detect_command(text) is None


class TestRetention:
    def test_keeps_only_retention_window(self):
        chat = ChatService(retention=5, history_limit=3)
        for i in range(10):
            chat.post("ana", f"message {i}")

        assert len(chat) == 5
        assert [m.message for m in chat.recent()] == ["message 7", "message 8", "message 9"]
        assert len(chat.recent(50)) == 5

    def test_since_returns_new_messages(self, chat):
        mark = chat.total_messages

        chat.post("ana", "first")
        chat.bot_say("reply")

        assert [m.message for m in chat.since(mark)] == ["first", "reply"]
        assert chat.since(chat.total_messages) == []

    def test_since_is_capped_by_retention(self):
        chat = ChatService(retention=2)
        mark = chat.total_messages
        for i in range(5):
            chat.post("ana", f"m{i}")

        assert [m.message for m in chat.since(mark)] == ["m3", "m4"]

"""
Unit tests for the mocked assistant responder.
"""

import pytest

from app.services.responder import GREETINGS, LONG_CONVERSATION, estimate_tokens, generate_reply


class TestEstimateTokens:

    @pytest.mark.parametrize("text, tokens", [("", 0), ("abcd", 1), ("abcde", 2), (None, 0)])
    def test_quarter_of_characters_rounded_up(self, text, tokens):
        assert estimate_tokens(text) == tokens


class TestGenerateReply:

    def test_question_echoes_message(self):
        reply = generate_reply("What is the refund policy?", "Support Bot", 1)

        assert "What is the refund policy?" in reply.content
        assert "Support Bot" in reply.content

    def test_short_conversation_introduces_model(self):
        reply = generate_reply("hello", "Support Bot", 1)

        assert reply.content.startswith("Thanks for your message. I am Support Bot")

    def test_long_conversation_continues(self):
        reply = generate_reply("noted", "Support Bot", LONG_CONVERSATION + 1)

        assert reply.content.startswith("Continuing our conversation")

    def test_question_wins_over_long_conversation(self):
        reply = generate_reply("why?", "Support Bot", LONG_CONVERSATION + 5)

        assert reply.content.startswith("Based on the documents")

    @pytest.mark.parametrize("language", sorted(set(GREETINGS) - {"english"}))
    def test_greeting_prefix(self, language):
        reply = generate_reply("hello", "Bot", 1, language=language)

        assert reply.content.startswith(GREETINGS[language])

    def test_unknown_language_falls_back_to_english(self):
        assert generate_reply("hello", "Bot", 1, "klingon") == generate_reply("hello", "Bot", 1)

    def test_token_accounting(self):
        reply = generate_reply("hello there", "Bot", 1)

        assert reply.prompt_tokens == estimate_tokens("hello there")
        assert reply.completion_tokens == estimate_tokens(reply.content)
        assert reply.total_tokens == reply.prompt_tokens + reply.completion_tokens

    def test_deterministic(self):
        assert generate_reply("same?", "Bot", 2, "french") == generate_reply("same?", "Bot", 2, "french")

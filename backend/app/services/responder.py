"""
Mocked AI responder.

Produces a deterministic reply from the user's message, the conversation
length and the chat language. No model is called.
"""
import math
from dataclasses import dataclass

GREETINGS = {
    "english": "",
    "hindi": "नमस्ते! ",
    "arabic": "مرحبا! ",
    "nepali": "नमस्कार! ",
    "spanish": "¡Hola! ",
    "french": "Bonjour ! ",
    "chinese": "你好！",
}

LONG_CONVERSATION = 4


@dataclass(frozen=True)
class Reply:
    content: str
    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters."""
    return math.ceil(len(text or "") / 4)


def generate_reply(message: str, model_name: str, history_length: int, language: str = "english") -> Reply:
    """
    Build the assistant reply for ``message``.

    Args:
        message: Latest user message
        model_name: Name of the AI model the chat uses
        history_length: Messages already in the chat, including ``message``
        language: Chat language; unknown languages fall back to English
    """
    greeting = GREETINGS.get(language, "")

    if "?" in message:
        body = (
            f"Based on the documents {model_name} was trained on, here is what I found "
            f"about your question: \"{message.strip()}\". The training material covers this "
            f"topic, and the key points are summarised above. Let me know if you need more detail."
        )
    elif history_length > LONG_CONVERSATION:
        body = (
            f"Continuing our conversation: I have noted \"{message.strip()}\". "
            f"{model_name} can connect this with what we discussed earlier if you ask a follow-up question."
        )
    else:
        body = (
            f"Thanks for your message. I am {model_name}, trained on your documents. "
            f"Ask me a question about them and I will answer from that material."
        )

    content = f"{greeting}{body}"
    return Reply(
        content=content,
        prompt_tokens=estimate_tokens(message),
        completion_tokens=estimate_tokens(content),
    )

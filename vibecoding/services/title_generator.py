"""
Conversation title generation from the first user message.
"""

from typing import Optional

from vibecoding.core.config import settings
from vibecoding.core.logging_config import logger
from vibecoding.utils.deepseek_client import DeepSeekClient, deepseek_client


DEFAULT_TITLE = "New chat"
QUOTE_CHARS = "\"'「」『』《》"

TITLE_SYSTEM_PROMPT = (
    "You write short conversation titles. Given the user's first message, reply with a "
    "concise title of at most {max_length} characters. Reply with the title only: no "
    "punctuation, quotes or explanation."
)


def clean_title(raw_title: str, user_message: str, max_length: Optional[int] = None) -> str:
    """
    Normalize a model-suggested title.

    - strips one surrounding quote character on each side
    - falls back to the start of the user message when shorter than 2 characters
    - truncates to max_length, preferring a cut at a space past position 10
    """
    if max_length is None:
        max_length = settings.TITLE_MAX_LENGTH

    title = raw_title.strip()
    if title[:1] and title[0] in QUOTE_CHARS:
        title = title[1:]
    if title[-1:] and title[-1] in QUOTE_CHARS:
        title = title[:-1]
    title = title.strip()

    if len(title) < 2:
        title = user_message[:max_length].strip() or DEFAULT_TITLE

    if len(title) > max_length:
        truncated = title[:max_length]
        last_space = truncated.rfind(' ')
        if last_space > 10:
            return truncated[:last_space]
        return truncated

    return title


async def generate_conversation_title(user_message: str, client: Optional[DeepSeekClient] = None) -> str:
    """Ask the model for a short title for a new conversation"""
    client = client or deepseek_client
    max_length = settings.TITLE_MAX_LENGTH

    messages = [
        {"role": "system", "content": TITLE_SYSTEM_PROMPT.format(max_length=max_length)},
        {
            "role": "user",
            "content": f"Write a concise title (at most {max_length} characters) for this conversation:\n\n{user_message}",
        },
    ]

    response = await client.chat(messages, max_tokens=settings.LLM_TITLE_MAX_TOKENS)
    title = clean_title(response.get("content") or "", user_message, max_length)
    logger.debug(f"[Title] Generated title: {title}")
    return title

"""Controller for the ask flow.

Persists the user's message, builds the prompt from the fact store, asks the
LLM, and stores whatever reply comes back (generated or canned).
"""
from typing import Optional

from ..data.storage import Storage
from ..schemas.storage_models import ChatMessage, InsertChatMessage, MessageRole
from ..utils.logger import get_logger
from .fallback import TECHNICAL_DIFFICULTIES_REPLY, fallback_reply
from .generate import GenerationClient, GenerationError
from .prompt_builder import PromptBuilder

logger = get_logger("chat")

DEFAULT_LANGUAGE = "en"


class ChatController:
    def __init__(self, storage: Storage, gen_client: Optional[GenerationClient] = None,
                 builder: Optional[PromptBuilder] = None):
        self.storage = storage
        self.gen_client = gen_client or GenerationClient()
        self.builder = builder or PromptBuilder()

    def answer(self, message: str) -> str:
        """Return the LLM's answer for `message`, or a canned reply when it fails."""
        facts = self.storage.get_college_info()
        messages = self.builder.build_messages(message, facts)
        try:
            return self.gen_client.generate_answer(messages)
        except GenerationError as e:
            logger.warning("Groq API error, using fallback: %s", e)
            return fallback_reply(message)

    def handle_ask(self, message: str, language: Optional[str] = None) -> ChatMessage:
        """
        Run the ask flow and return the stored assistant message.

        Storage failures are answered with the technical-difficulties reply; if
        storing that also fails the StorageError propagates to the caller.
        """
        language = language or DEFAULT_LANGUAGE
        try:
            self.storage.create_chat_message(
                InsertChatMessage(content=message, role=MessageRole.user, language=language)
            )
            reply = self.answer(message)
            return self.storage.create_chat_message(
                InsertChatMessage(content=reply, role=MessageRole.assistant, language=language)
            )
        except Exception:
            logger.exception("Error in ask flow")
            return self.storage.create_chat_message(
                InsertChatMessage(content=TECHNICAL_DIFFICULTIES_REPLY, role=MessageRole.assistant,
                                  language=DEFAULT_LANGUAGE)
            )

"""Free-form questions about the passage the reader is looking at."""

from __future__ import annotations

from ..telemetry.logger import EventLogger
from .prompts import PromptLibrary
from .translator import ChatClient

READER_CHAT_TEMPERATURE = 0.3


class ContextAssistant:
    """Answer reader questions grounded in a supplied document context."""

    def __init__(
        self,
        client: ChatClient,
        prompts: PromptLibrary | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        self.client = client
        self.prompts = prompts if prompts is not None else PromptLibrary()
        self.logger = logger if logger is not None else EventLogger("chat")

    def ask(self, model: str, context: str, question: str) -> str:
        """Return the model's answer to `question` about `context`."""

        normalized_question = question.strip()
        if not normalized_question:
            raise ValueError("Question must be a non-empty string.")

        answer = self.client.complete(
            model=model,
            temperature=READER_CHAT_TEMPERATURE,
            system_prompt=self.prompts.reader_chat_system_prompt(),
            user_prompt=self.prompts.reader_chat_prompt(context.strip(), normalized_question),
        )
        self.logger.info("answered", model=model, context_chars=len(context))
        return answer.strip()

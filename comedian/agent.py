"""In-memory conversational agent on top of the Responses API.

The agent keeps its transcript in the shape the Responses API expects as
``input`` and resends it in full on every ``respond`` call, so the model sees
the whole conversation without any server-side session.

An ``Agent`` instance is not safe for concurrent ``respond`` calls; callers
must serialize per instance (see ``comedian.sessions``).
"""

import os
import logging
from typing import Any, List, Optional

from .errors import EmptyResponseError, InvalidArgumentError, MissingCredentialError
from .extract import extract_text
from .models import DEFAULT_MODEL, LLMClient
from .schemas import AgentConfig, Message

logger = logging.getLogger(__name__)


class Agent:
    def __init__(self, name: str = "Agent", instructions: str = None, model: str = DEFAULT_MODEL,
                 client: Optional[LLMClient] = None, api_key: str = None):
        # raises ConfigurationError on missing or blank instructions
        self.config = AgentConfig(name=name, instructions=instructions, model=model, api_key=api_key)
        self.client = client
        self.messages: List[Message] = [
            Message.of("system", f"{instructions}\nYou are performing as {name}.")
        ]
        self.tools: List[Any] = []
        self.last_topic: Optional[str] = None

    @classmethod
    def from_config(cls, config: AgentConfig, client: Optional[LLMClient] = None) -> "Agent":
        return cls(name=config.name, instructions=config.instructions, model=config.model,
                   client=client, api_key=config.api_key)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def history(self) -> List[Message]:
        return list(self.messages)

    def use(self, tool: Any) -> "Agent":
        """Register a tool handle for later use. Has no effect on responses yet."""
        self.tools.append(tool)
        return self

    def reset(self):
        """Drop every turn after the system message."""
        self.messages = self.messages[:1]
        self.last_topic = None

    def _resolve_client(self) -> LLMClient:
        api_key = self.config.api_key or getattr(self.client, "api_key", None) or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise MissingCredentialError()
        if self.client is None:
            self.client = LLMClient(model_name=self.model, api_key=api_key)
        return self.client

    def respond(self, prompt: str) -> str:
        """
        Send *prompt* with the full transcript and return the reply text.

        A failed call leaves the user turn in the transcript; a later call
        resends it together with the new prompt.
        """
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidArgumentError("Agent prompt is required.")

        client = self._resolve_client()

        self.messages.append(Message.of("user", prompt))

        response = client.create_response(
            input=[m.model_dump() for m in self.messages],
            model=self.model,
        )

        text = extract_text(response)
        if not text:
            logger.warning(f"{self.name}: response for turn {len(self.messages) - 1} had no text")
            raise EmptyResponseError("Agent response did not contain text content.")

        self.messages.append(Message.of("assistant", text))
        return text

import os
import logging
from typing import Any, Optional
from openai import OpenAI

from .errors import MissingCredentialError

DEFAULT_MODEL = "gpt-4o-mini"

class LLMClient:
    def __init__(self, model_name: str = None, api_key: str = None, base_url: str = None):
        self.model_name = model_name or os.getenv("OPENAI_MODEL") or DEFAULT_MODEL
        self.logger = logging.getLogger(__name__)

        # Load API key and base URL from env if not provided
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("OPENAI_BASE_URL")

        if not self.api_key:
            raise MissingCredentialError()

        self.client = OpenAI(api_key=self.api_key, base_url=self.base_url)

    def create_response(self, input: Any, model: Optional[str] = None, **options):
        """
        Issue a single Responses API call and return the raw payload.
        Transport errors propagate to the caller; nothing is retried.
        """
        model = model or self.model_name
        self.logger.debug(f"Calling responses.create ({model})")
        try:
            return self.client.responses.create(model=model, input=input, **options)
        except Exception as e:
            self.logger.error(f"Error calling API ({model}): {e}")
            raise

    def create_hosted_response(self, input: Any, hosted_fields: dict):
        """
        Call a hosted agent. The agent carries its own model, so the request
        names the agent and optional session/workflow instead.
        """
        self.logger.debug(f"Calling hosted agent {hosted_fields.get('agent_id')}")
        try:
            return self.client.responses.create(input=input, extra_body=hosted_fields)
        except Exception as e:
            self.logger.error(f"Error calling hosted agent {hosted_fields.get('agent_id')}: {e}")
            raise

    def create_chatkit_secret(self, workflow_id: str, user: str, expires_in: int = 3600) -> str:
        """Mint a short-lived ChatKit client secret that is safe to hand to a browser."""
        session = self.client.beta.chatkit.sessions.create(
            user=user,
            workflow={"id": workflow_id},
            expires_after={"anchor": "created_at", "seconds": expires_in},
        )
        secret = session.client_secret
        # Older session payloads wrap the secret as {"value": ...}
        if not isinstance(secret, str):
            secret = getattr(secret, "value", None) or secret["value"]
        return secret

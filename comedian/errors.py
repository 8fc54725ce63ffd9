class ComedianError(Exception):
    """Base class for errors raised by the agent and joke services."""


class ConfigurationError(ComedianError):
    """Agent configuration is invalid (e.g. missing instructions)."""


class InvalidArgumentError(ComedianError, ValueError):
    """A caller-supplied value (prompt, topic, request body) is missing or unusable."""


class MissingCredentialError(ComedianError):
    """No OpenAI API key could be resolved from arguments or environment."""

    def __init__(self, message: str = "Missing OPENAI_API_KEY environment variable."):
        super().__init__(message)


class EmptyResponseError(ComedianError):
    """The completion call succeeded but carried no extractable text."""

from typing import Optional

from .agent import Agent
from .errors import EmptyResponseError, InvalidArgumentError
from .extract import extract_text
from .models import LLMClient
from .schemas import HostedAgentOptions, Message

COMEDIAN_NAME = "ComedianBot"
COMEDIAN_INSTRUCTIONS = (
    "You are a stand-up comedian who tells short, family-friendly jokes. "
    "Keep every joke to two or three sentences. "
    "When the audience has asked about a topic before, you may call back to it."
)

def _clean_topic(topic) -> str:
    topic = topic.strip() if isinstance(topic, str) else ""
    if not topic:
        raise InvalidArgumentError("Topic is required.")
    return topic

def tell_joke(client: LLMClient, topic: str) -> str:
    """Stateless joke: one prompt, no history."""
    topic = _clean_topic(topic)
    response = client.create_response(input=f"Tell me a short, family-friendly joke about {topic}.")
    joke = extract_text(response)
    if not joke:
        raise EmptyResponseError("The AI response did not include any text content.")
    return joke

def tell_agent_joke(client: LLMClient, topic: str, options: HostedAgentOptions) -> str:
    """
    Joke from a hosted agent. Reusing options.session_id lets the service
    remember earlier topics without us storing anything.
    """
    topic = _clean_topic(topic)
    message = Message.of("user", f"Tell a short, family-friendly joke about {topic}.")
    response = client.create_hosted_response(
        input=[message.model_dump()],
        hosted_fields=options.request_fields(),
    )
    joke = extract_text(response)
    if not joke:
        raise EmptyResponseError("Agent response did not include text content.")
    return joke

def create_comedian(client: Optional[LLMClient] = None, api_key: str = None, model: str = None) -> Agent:
    # Follow the client's configured model (e.g. OPENAI_MODEL) unless told otherwise
    model = model or getattr(client, "model_name", None)
    kwargs = {"model": model} if model else {}
    return Agent(name=COMEDIAN_NAME, instructions=COMEDIAN_INSTRUCTIONS, client=client, api_key=api_key, **kwargs)

def tell_session_joke(agent: Agent, topic: str) -> str:
    """Joke through a stateful agent; the agent remembers the previous topic."""
    topic = _clean_topic(topic)
    prompt = f"Tell me a short, family-friendly joke about {topic}."
    if agent.last_topic and agent.last_topic.lower() != topic.lower():
        prompt += f" Last time we joked about {agent.last_topic}; feel free to call back to it."
    joke = agent.respond(prompt)
    agent.last_topic = topic
    return joke

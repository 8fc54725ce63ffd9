"""Tests for the in-memory conversational Agent."""

import pytest
from pydantic import ValidationError

from comedian.agent import Agent
from comedian.errors import ConfigurationError, EmptyResponseError, InvalidArgumentError, MissingCredentialError
from comedian.schemas import AgentConfig


class KeyEchoClient:
    """Stands in for LLMClient; replies with the key it was built with."""

    def __init__(self, model_name=None, api_key=None, base_url=None):
        self.model_name = model_name
        self.api_key = api_key

    def create_response(self, input, model=None, **options):
        return {"output_text": self.api_key}


# ── Construction ──────────────────────────────────────────────────────────

class TestConstruction:

    def test_empty_instructions_rejected(self):
        with pytest.raises(ConfigurationError):
            Agent(instructions="")

    def test_missing_instructions_rejected(self):
        with pytest.raises(ConfigurationError):
            Agent()

    def test_blank_instructions_rejected(self):
        with pytest.raises(ConfigurationError):
            Agent(instructions="   ")

    def test_transcript_starts_with_system_message(self):
        agent = Agent(instructions="Be funny")
        assert len(agent.history) == 1
        system = agent.history[0]
        assert system.role == "system"
        assert system.text == "Be funny\nYou are performing as Agent."

    def test_name_and_model(self):
        agent = Agent(name="ComedianBot", instructions="Be funny", model="gpt-4.1-mini")
        assert agent.name == "ComedianBot"
        assert agent.model == "gpt-4.1-mini"
        assert agent.history[0].text.endswith("You are performing as ComedianBot.")

    def test_from_config(self, echo_client):
        config = AgentConfig(name="Bot", instructions="Be dry", model="gpt-4o")
        agent = Agent.from_config(config, client=echo_client)
        assert agent.config == config
        assert agent.client is echo_client

    def test_config_rejects_empty_instructions(self):
        """The config model itself refuses to exist without instructions."""
        with pytest.raises(ConfigurationError):
            AgentConfig(instructions="")
        with pytest.raises(ConfigurationError):
            AgentConfig(name="Bot")
        with pytest.raises(ConfigurationError):
            AgentConfig(instructions=" \n ")

    def test_config_accepts_instructions(self):
        config = AgentConfig(instructions="Be funny")
        assert config.instructions == "Be funny"
        assert config.name == "Agent"

    def test_invalid_argument_is_value_error(self):
        assert issubclass(InvalidArgumentError, ValueError)
        assert InvalidArgumentError.__doc__

    def test_config_is_frozen(self):
        agent = Agent(instructions="Be funny")
        with pytest.raises(ValidationError):
            agent.config.name = "Other"

    def test_use_registers_tool_and_chains(self):
        agent = Agent(instructions="Be funny")
        tool = object()
        assert agent.use(tool) is agent
        assert agent.tools == [tool]


# ── respond() ─────────────────────────────────────────────────────────────

class TestRespond:

    def test_successful_turn_appends_user_and_assistant(self, scripted):
        client = scripted({"output_text": "Why did..."})
        agent = Agent(instructions="Be funny", client=client)

        assert agent.respond("tell a joke about cats") == "Why did..."

        history = agent.history
        assert [m.role for m in history] == ["system", "user", "assistant"]
        assert history[1].text == "tell a joke about cats"
        assert history[2].text == "Why did..."

    def test_request_carries_full_transcript_and_model(self, scripted):
        client = scripted({"output_text": "one"}, {"output_text": "two"})
        agent = Agent(instructions="Be funny", model="gpt-4o", client=client)
        agent.respond("first")
        agent.respond("second")

        second_call = client.calls[1]
        assert second_call["model"] == "gpt-4o"
        roles = [m["role"] for m in second_call["input"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert second_call["input"][-1]["content"] == [{"type": "input_text", "text": "second"}]
        assert second_call["input"][2]["content"] == [{"type": "output_text", "text": "one"}]

    def test_empty_prompt_leaves_transcript_unchanged(self, scripted):
        client = scripted()
        agent = Agent(instructions="Be funny", client=client)
        with pytest.raises(InvalidArgumentError):
            agent.respond("")
        with pytest.raises(InvalidArgumentError):
            agent.respond(None)
        assert len(agent.history) == 1
        assert client.calls == []

    def test_missing_credential(self):
        agent = Agent(instructions="Be funny")
        with pytest.raises(MissingCredentialError):
            agent.respond("cats")
        assert len(agent.history) == 1

    def test_explicit_api_key_builds_client(self, monkeypatch):
        monkeypatch.setattr("comedian.agent.LLMClient", KeyEchoClient)
        agent = Agent(instructions="Be funny", model="gpt-4o", api_key="sk-explicit")
        assert agent.respond("cats") == "sk-explicit"
        assert agent.client.model_name == "gpt-4o"

    def test_environment_credential(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setattr("comedian.agent.LLMClient", KeyEchoClient)
        agent = Agent(instructions="Be funny")
        assert agent.respond("cats") == "sk-env"

    def test_empty_response_keeps_user_turn(self, scripted):
        client = scripted({"output": []}, {"output_text": "Second try"})
        agent = Agent(instructions="Be funny", client=client)

        with pytest.raises(EmptyResponseError):
            agent.respond("cats")
        assert [m.role for m in agent.history] == ["system", "user"]

        assert agent.respond("cats again") == "Second try"
        assert [m.role for m in agent.history] == ["system", "user", "user", "assistant"]

    def test_transport_error_propagates_unchanged(self, scripted):
        error = ConnectionError("network down")
        agent = Agent(instructions="Be funny", client=scripted(error))
        with pytest.raises(ConnectionError) as exc_info:
            agent.respond("cats")
        assert exc_info.value is error


# ── reset() and replay ───────────────────────────────────────────────────

class TestReset:

    def test_reset_restores_system_message(self, echo_client):
        agent = Agent(instructions="Be funny", client=echo_client)
        original = agent.history[0]
        for topic in ("cats", "dogs", "owls"):
            agent.respond(topic)
        agent.last_topic = "owls"

        agent.reset()

        assert agent.history == [original]
        assert agent.last_topic is None

    def test_reset_on_fresh_agent(self):
        agent = Agent(instructions="Be funny")
        agent.reset()
        assert len(agent.history) == 1

    def test_configuration_survives_reset(self, echo_client):
        agent = Agent(name="Bot", instructions="Be funny", client=echo_client).use("tool")
        agent.respond("cats")
        agent.reset()
        assert agent.name == "Bot"
        assert agent.tools == ["tool"]
        agent.respond("dogs")
        assert len(agent.history) == 3

    def test_identical_agents_replay_identically(self, echo_factory):
        prompts = ["cats", "dogs", "cats again"]
        first = Agent(name="Bot", instructions="Be funny", client=echo_factory())
        second = Agent(name="Bot", instructions="Be funny", client=echo_factory())
        for prompt in prompts:
            first.respond(prompt)
            second.respond(prompt)
        assert first.history == second.history

import logging
import os
import uuid
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import InvalidArgumentError, MissingCredentialError
from .jokes import create_comedian, tell_agent_joke, tell_joke, tell_session_joke
from .models import LLMClient
from .schemas import AgentJokeRequest, ChatRequest, HostedAgentOptions, JokeRequest, ResetRequest
from .sessions import DEFAULT_CONVERSATION, DEFAULT_MAX_CONVERSATIONS, ConversationStore

logger = logging.getLogger(__name__)


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(title="ComedianBot API")

_frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[_frontend_url],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.state.client = None
app.state.conversations = ConversationStore(
    create_comedian,
    max_conversations=int(os.getenv("MAX_CONVERSATIONS", DEFAULT_MAX_CONVERSATIONS)),
)


def get_client(request: Request) -> LLMClient:
    """Shared OpenAI client, created on first use so a missing key surfaces per request."""
    if request.app.state.client is None:
        request.app.state.client = LLMClient()
    return request.app.state.client


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    return _error(400, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Unparseable or non-object bodies; missing fields never get here
    logger.info("Rejected body on %s: %s", request.url.path, exc.errors())
    return _error(400, "Invalid request body.")


@app.exception_handler(MissingCredentialError)
async def missing_credential_handler(request: Request, exc: MissingCredentialError):
    return _error(500, str(exc))


# ---------------------------------------------------------------------------
# Jokes
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/api/joke")
def joke(body: Optional[JokeRequest] = None, client: LLMClient = Depends(get_client)):
    body = body or JokeRequest()
    topic = _clean(body.topic)
    if not topic:
        raise InvalidArgumentError("Topic is required.")
    try:
        return {"joke": tell_joke(client, topic)}
    except Exception as e:
        logger.error("Failed to fetch joke: %s", e)
        return _error(500, "Failed to fetch a joke. Please try again.")


@app.post("/api/agent-joke")
def agent_joke(body: Optional[AgentJokeRequest] = None, client: LLMClient = Depends(get_client)):
    body = body or AgentJokeRequest()
    topic = _clean(body.topic)
    if not topic:
        raise InvalidArgumentError("Topic is required.")

    agent_id = _clean(body.agentId) or _clean(os.getenv("OPENAI_AGENT_ID"))
    if not agent_id:
        raise InvalidArgumentError(
            "An OpenAI Agent ID is required. Provide it in the request body or set OPENAI_AGENT_ID."
        )

    options = HostedAgentOptions(
        agent_id=agent_id,
        session_id=_clean(body.sessionId) or None,
        workflow_id=_clean(body.workflowId) or None,
    )
    try:
        return {"joke": tell_agent_joke(client, topic, options)}
    except Exception as e:
        logger.error("Comedian agent failed to fetch joke: %s", e)
        return _error(500, "ComedianBot tripped on the mic cable. Please try again shortly.")


# ---------------------------------------------------------------------------
# Stateful chat (one ComedianBot per conversation id)
# ---------------------------------------------------------------------------

@app.post("/api/chat")
def chat(request: Request, body: Optional[ChatRequest] = None, client: LLMClient = Depends(get_client)):
    body = body or ChatRequest()
    topic = _clean(body.topic)
    if not topic:
        raise InvalidArgumentError("Topic is required.")

    conversation_id = _clean(body.conversationId) or DEFAULT_CONVERSATION
    store: ConversationStore = request.app.state.conversations
    agent, lock = store.get(conversation_id, factory=lambda: create_comedian(client=client))
    try:
        with lock:
            reply = tell_session_joke(agent, topic)
    except Exception as e:
        logger.error("ComedianBot failed on conversation %s: %s", conversation_id, e)
        return _error(500, "Failed to fetch a joke. Please try again.")
    return {"joke": reply, "conversationId": conversation_id}


@app.post("/api/chat/reset")
def chat_reset(request: Request, body: Optional[ResetRequest] = None):
    body = body or ResetRequest()
    conversation_id = _clean(body.conversationId) or DEFAULT_CONVERSATION
    store: ConversationStore = request.app.state.conversations
    return {"reset": store.reset(conversation_id), "conversationId": conversation_id}


@app.post("/api/chat/end")
def chat_end(request: Request, body: Optional[ResetRequest] = None):
    body = body or ResetRequest()
    conversation_id = _clean(body.conversationId) or DEFAULT_CONVERSATION
    store: ConversationStore = request.app.state.conversations
    return {"ended": store.discard(conversation_id), "conversationId": conversation_id}


# ---------------------------------------------------------------------------
# ChatKit tokens
# ---------------------------------------------------------------------------

def _mint_token(client: LLMClient):
    workflow_id = _clean(os.getenv("OPENAI_CHATKIT_WORKFLOW_ID"))
    if not workflow_id:
        return _error(500, "Missing OPENAI_CHATKIT_WORKFLOW_ID environment variable.")
    try:
        secret = client.create_chatkit_secret(workflow_id, user=str(uuid.uuid4()))
    except Exception as e:
        logger.error("Token creation error: %s", e)
        return _error(500, "Failed to create ChatKit token")
    return {"client_secret": secret}


@app.api_route("/api/token", methods=["GET", "POST"])
def token(client: LLMClient = Depends(get_client)):
    return _mint_token(client)


@app.post("/api/chatkit-token")
def chatkit_token(client: LLMClient = Depends(get_client)):
    # Short-lived secret only; the API key never leaves the server
    return _mint_token(client)

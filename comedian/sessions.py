import logging
import threading
from collections import OrderedDict
from typing import Callable, Tuple

from .agent import Agent

logger = logging.getLogger(__name__)

DEFAULT_CONVERSATION = "default"
DEFAULT_MAX_CONVERSATIONS = 1000

class ConversationStore:
    """
    One Agent per conversation id, each paired with a lock.
    Hold the lock around agent.respond(); an Agent's transcript
    is not safe to mutate from two threads at once.

    At most max_conversations are kept; the least recently used
    conversation is dropped when a new one would exceed the cap.
    """

    def __init__(self, factory: Callable[[], Agent], max_conversations: int = DEFAULT_MAX_CONVERSATIONS):
        if max_conversations < 1:
            raise ValueError("max_conversations must be at least 1")
        self.factory = factory
        self.max_conversations = max_conversations
        self._agents: "OrderedDict[str, Tuple[Agent, threading.Lock]]" = OrderedDict()
        self._map_lock = threading.Lock()

    def get(self, conversation_id: str = None,
            factory: Callable[[], Agent] = None) -> Tuple[Agent, threading.Lock]:
        conversation_id = conversation_id or DEFAULT_CONVERSATION
        with self._map_lock:
            if conversation_id in self._agents:
                self._agents.move_to_end(conversation_id)
                return self._agents[conversation_id]

            agent = (factory or self.factory)()
            self._agents[conversation_id] = (agent, threading.Lock())
            while len(self._agents) > self.max_conversations:
                evicted, _ = self._agents.popitem(last=False)
                logger.info(f"Evicted idle conversation {evicted}")
            return self._agents[conversation_id]

    def reset(self, conversation_id: str = None) -> bool:
        conversation_id = conversation_id or DEFAULT_CONVERSATION
        with self._map_lock:
            entry = self._agents.get(conversation_id)
        if entry is None:
            return False
        agent, lock = entry
        with lock:
            agent.reset()
        return True

    def discard(self, conversation_id: str = None) -> bool:
        with self._map_lock:
            return self._agents.pop(conversation_id or DEFAULT_CONVERSATION, None) is not None

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)

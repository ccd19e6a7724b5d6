from typing import Callable, Dict, List

from research_assistant import config
from research_assistant.llm_client import complete_chat
from research_assistant.logger import get_logger
from research_assistant.state import SessionStore

logger = get_logger("Conversation")

CompletionFn = Callable[..., str]


class ConversationService:
    """Runs one chat turn: store the user message, ask the model, store the reply."""

    def __init__(
        self,
        store: SessionStore,
        complete: CompletionFn = complete_chat,
        context_window: int = config.CONTEXT_WINDOW,
        system_prompt: str = config.SYSTEM_PROMPT,
        max_tokens: int = config.LLM_MAX_TOKENS,
        temperature: float = config.LLM_TEMPERATURE,
        fallback_reply: str = config.FALLBACK_REPLY,
    ) -> None:
        self.store = store
        self.complete = complete
        self.context_window = context_window
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.fallback_reply = fallback_reply

    def _context(self, session_id: str) -> List[Dict[str, str]]:
        history = self.store.get_history(session_id)
        recent = history[-self.context_window:] if self.context_window > 0 else []
        return [{"role": m.role, "content": m.content} for m in recent]

    def respond(self, session_id: str, user_text: str) -> str:
        # SessionNotFoundError propagates from here; nothing is stored for unknown sessions
        self.store.append_message(session_id, "user", user_text)

        messages = self._context(session_id)
        logger.info("Session %s: requesting reply with %d context messages", session_id, len(messages))

        # A CompletionError leaves the user turn in place without a reply
        reply = self.complete(
            messages,
            system_prompt=self.system_prompt,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not reply or not reply.strip():
            logger.warning("Session %s: empty completion, using fallback reply", session_id)
            reply = self.fallback_reply

        self.store.append_message(session_id, "assistant", reply)
        return reply

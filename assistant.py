"""
assistant.py — SiteScan Assistant conversation

Keeps the chat turns for one browser session. Each question is answered from
a snapshot of every artifact and note, serialized into a single prompt.
"""

import json
import logging
from typing import Callable, List, MutableMapping, Optional, Sequence

from models import Artifact, ChatMessage, Note

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, I encountered an error. Please try again."

PROMPT_TEMPLATE = """You are a helpful assistant for an archaeological documentation app called SiteScan. Answer questions about the artifacts and notes data below.

ARTIFACTS DATA:
{artifacts}

NOTES DATA:
{notes}

User question: {question}

Provide a helpful, concise answer based on the data above."""


def build_prompt(question: str, artifacts: Sequence[Artifact], notes: Sequence[Note]) -> str:
    return PROMPT_TEMPLATE.format(
        artifacts=json.dumps([a.model_dump(mode="json") for a in artifacts], indent=2),
        notes=json.dumps([n.model_dump(mode="json") for n in notes], indent=2),
        question=question,
    )


class Conversation:
    """Append-only chat history; only one question may be in flight at a time."""

    def __init__(self, state: MutableMapping, key: str = "chat"):
        self.state = state
        self.messages_key = f"{key}_messages"
        self.loading_key = f"{key}_loading"
        state.setdefault(self.messages_key, [])
        state.setdefault(self.loading_key, False)

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self.state[self.messages_key])

    @property
    def loading(self) -> bool:
        return self.state[self.loading_key]

    def _append(self, role: str, content: str) -> None:
        self.state[self.messages_key] = self.state[self.messages_key] + [ChatMessage(role=role, content=content)]

    def ask(self, question: str, artifacts: Sequence[Artifact], notes: Sequence[Note],
            invoke: Callable) -> Optional[ChatMessage]:
        """Returns the assistant turn, or None if the question was blank or another is in flight."""
        question = (question or "").strip()
        if not question or self.loading:
            return None

        self._append("user", question)
        self.state[self.loading_key] = True
        try:
            reply = invoke(build_prompt(question, artifacts, notes))
        except Exception as e:
            logger.error("Assistant request failed: %s", e)
            reply = APOLOGY
        finally:
            self.state[self.loading_key] = False

        self._append("assistant", reply)
        return self.state[self.messages_key][-1]

"""Single-flight request/response cycle shared by the chat and image variants.

This module hides the design decision of how user submissions, replies
and failures are recorded in the conversation:

    idle --submit--> pending --success/failure--> idle

At most one request is in flight. The guard is the `pending` state alone:
the event loop is single-threaded and the state flips before the first
suspension point, so a second submit always sees it.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..conversation import Conversation, Message, MessageIdGenerator, Sender
from .models import FAILURE_TEXT, RequestState

DebugCallback = Callable[[str, str, str], None]
ChangeCallback = Callable[[], None]


def _truncate(text: str, max_len: int = 80) -> str:
    return text[:max_len] + "..." if len(text) > max_len else text


class RequestOrchestrator(ABC):
    """Drives one request at a time against the AI client.

    Subclasses decide when they are ready to accept input, how a request
    is dispatched and what a successful result does to the state.
    """

    component = "Orchestrator"

    def __init__(
        self,
        conversation: Conversation,
        id_generator: MessageIdGenerator | None = None,
    ) -> None:
        self._conversation = conversation
        self._state = RequestState.IDLE
        self._ids = id_generator or MessageIdGenerator()
        self._debug_callback: DebugCallback | None = None
        self._change_callback: ChangeCallback | None = None

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def is_pending(self) -> bool:
        return self._state is RequestState.PENDING

    @property
    @abstractmethod
    def ready(self) -> bool:
        """Whether the orchestrator can accept a submission at all."""

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback for operational logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback

    def set_change_callback(self, callback: ChangeCallback | None) -> None:
        """Set a callback invoked after every change to conversation or state."""
        self._change_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, self.component, message)

    def _changed(self) -> None:
        if self._change_callback:
            self._change_callback()

    def _append(self, text: str, sender: Sender, message_id: str | None = None) -> Message:
        message = Message(id=message_id or self._ids.next_id(), text=text, sender=sender)
        self._conversation = self._conversation.append(message)
        self._changed()
        return message

    def _set_state(self, state: RequestState) -> None:
        self._state = state
        self._changed()

    async def submit(self, text: str) -> bool:
        """Submit user input.

        Ignored (returns False) when the text is blank, a request is
        already pending, or the orchestrator is not ready. Adapter failures
        are logged and turned into a fixed bot message; they never propagate.

        Returns:
            True if the submission was accepted
        """
        if not text.strip() or self.is_pending or not self.ready:
            return False

        self._append(text, Sender.USER)
        self._set_state(RequestState.PENDING)
        self._debug("info", f"Sending: '{_truncate(text)}'")

        try:
            result = await self._dispatch(text)
            self._on_success(result)
        except Exception as e:
            self._debug("error", f"Request failed: {type(e).__name__}: {e}")
            self._append(FAILURE_TEXT, Sender.BOT)
        finally:
            self._set_state(RequestState.IDLE)

        return True

    @abstractmethod
    async def _dispatch(self, text: str) -> Any:
        """Send the request to the AI client and return its raw result."""

    @abstractmethod
    def _on_success(self, result: Any) -> None:
        """Apply a successful result to the state."""

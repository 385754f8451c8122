"""Chat variant of the request cycle."""

from ..conversation import DEFAULT_GREETING, Conversation, MessageIdGenerator, Sender
from ..llm import AIClient, ChatSession
from .base import RequestOrchestrator
from .models import INIT_ERROR_ID, INIT_ERROR_TEXT


class ChatOrchestrator(RequestOrchestrator):
    """Chat with a hosted model through a provider-side session.

    The session holds the turn history on the provider's side; the
    conversation here is only what gets displayed.

    Example:
        chat = ChatOrchestrator(client)
        await chat.start()
        await chat.submit("What is a monad?")
        reply = chat.conversation.messages[-1].text
    """

    component = "Chat"

    def __init__(
        self,
        client: AIClient,
        model: str | None = None,
        greeting: str = DEFAULT_GREETING,
        id_generator: MessageIdGenerator | None = None,
    ) -> None:
        super().__init__(Conversation.initial(greeting), id_generator)
        self._client = client
        self._model = model
        self._session: ChatSession | None = None

    @property
    def ready(self) -> bool:
        return self._session is not None

    @property
    def model(self) -> str | None:
        return self._model

    async def start(self) -> bool:
        """Establish the AI session.

        A failure is reported once as a bot message; the session stays
        unset and later submissions are ignored.

        Returns:
            True if the session was created
        """
        try:
            self._session = await self._client.create_session(model=self._model, history=[])
        except Exception as e:
            self._session = None
            self._debug("error", f"Failed to initialize AI session: {type(e).__name__}: {e}")
            self._append(INIT_ERROR_TEXT, Sender.BOT, message_id=INIT_ERROR_ID)
            return False

        self._debug("info", f"Session created (model: {self._model or 'default'})")
        self._changed()
        return True

    async def reset(self) -> bool:
        """Clear the conversation and start a fresh provider session.

        Ignored while a request is pending. Asking the user for
        confirmation is the caller's job.

        Returns:
            True if the conversation was cleared
        """
        if self.is_pending:
            return False

        self._conversation = self._conversation.reset()
        self._debug("info", "Conversation cleared")
        self._changed()
        # A session that never started stays down; clearing is not a retry
        if self._session is not None:
            await self.start()
        return True

    async def _dispatch(self, text: str) -> str:
        assert self._session is not None
        return await self._session.send_message(text)

    def _on_success(self, result: str) -> None:
        self._debug("info", f"Response received ({len(result)} chars)")
        self._append(result, Sender.BOT)

"""Voice call events.

The Vapi web SDK and Vapi's server webhooks both report a call as a stream of
events. Here that stream is a fixed set of named events, each with its own
payload model, published on a ``VoiceEventBus``. ``AssistantSession`` keeps the
conversation state a client shows while a call is running.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from maxfit.services.call_history import requester_email

logger = logging.getLogger(__name__)


class VoiceEvent(str, Enum):
    CALL_START = "call-start"
    CALL_END = "call-end"
    SPEECH_START = "speech-start"
    SPEECH_END = "speech-end"
    MESSAGE = "message"
    ERROR = "error"


class CallStarted(BaseModel):
    call_id: Optional[str] = None


class CallEnded(BaseModel):
    call_id: Optional[str] = None
    user_email: Optional[str] = None
    ended_reason: Optional[str] = None


class SpeechStarted(BaseModel):
    role: str = "assistant"


class SpeechEnded(BaseModel):
    role: str = "assistant"


class VoiceMessage(BaseModel):
    """A raw SDK/server message; only some of them carry conversation text."""
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    role: Optional[str] = None
    transcriptType: Optional[str] = None
    transcript: Optional[str] = None
    message: Optional[str] = None
    content: Optional[str] = None
    text: Optional[str] = None


class VoiceError(BaseModel):
    message: str
    call_id: Optional[str] = None


PAYLOAD_TYPES = {
    VoiceEvent.CALL_START: CallStarted,
    VoiceEvent.CALL_END: CallEnded,
    VoiceEvent.SPEECH_START: SpeechStarted,
    VoiceEvent.SPEECH_END: SpeechEnded,
    VoiceEvent.MESSAGE: VoiceMessage,
    VoiceEvent.ERROR: VoiceError,
}

Handler = Callable[[BaseModel], Any]


class VoiceEventBus:
    def __init__(self):
        self._handlers: Dict[VoiceEvent, List[Handler]] = {event: [] for event in VoiceEvent}

    def on(self, event, handler: Handler) -> "VoiceEventBus":
        self._handlers[VoiceEvent(event)].append(handler)
        return self

    def off(self, event, handler: Handler) -> "VoiceEventBus":
        handlers = self._handlers[VoiceEvent(event)]
        if handler in handlers:
            handlers.remove(handler)
        return self

    def emit(self, event, payload: BaseModel) -> int:
        """Call every handler subscribed to ``event``. Returns how many ran.

        Raises:
            TypeError: ``payload`` is not the model registered for ``event``.
        """
        event = VoiceEvent(event)
        expected = PAYLOAD_TYPES[event]
        if not isinstance(payload, expected):
            raise TypeError(f"{event.value} expects {expected.__name__}, got {type(payload).__name__}")

        handlers = list(self._handlers[event])
        for handler in handlers:
            handler(payload)
        return len(handlers)


class ChatMessage(BaseModel):
    content: str
    role: str = "assistant"


def message_to_chat(message: VoiceMessage) -> Optional[ChatMessage]:
    """Conversation text carried by ``message``, if any.

    Only final transcripts count; partial ones would duplicate lines.
    """
    if message.type == "transcript":
        if message.transcriptType == "final" and message.transcript:
            return ChatMessage(content=message.transcript, role=message.role or "assistant")
        return None
    if message.type == "function-call":
        return None
    content = message.message or message.content or message.text
    if content:
        return ChatMessage(content=content, role=message.role or "assistant")
    return None


class AssistantSession:
    """Client-side state of one assistant conversation."""

    def __init__(self, bus: VoiceEventBus, on_call_end: Optional[Callable[[CallEnded], Any]] = None):
        self.bus = bus
        self.on_call_end = on_call_end
        self.connecting = False
        self.call_active = False
        self.is_speaking = False
        self.call_ended = False
        self.messages: List[ChatMessage] = []
        self.last_error: Optional[str] = None
        self._subscriptions = [
            (VoiceEvent.CALL_START, self._handle_call_start),
            (VoiceEvent.CALL_END, self._handle_call_end),
            (VoiceEvent.SPEECH_START, self._handle_speech_start),
            (VoiceEvent.SPEECH_END, self._handle_speech_end),
            (VoiceEvent.MESSAGE, self._handle_message),
            (VoiceEvent.ERROR, self._handle_error),
        ]

    def attach(self) -> "AssistantSession":
        for event, handler in self._subscriptions:
            self.bus.on(event, handler)
        return self

    def detach(self):
        for event, handler in self._subscriptions:
            self.bus.off(event, handler)

    def begin_connecting(self):
        """Reset the conversation before a new call is started."""
        self.connecting = True
        self.call_ended = False
        self.messages = []
        self.last_error = None

    def _handle_call_start(self, payload: CallStarted):
        self.connecting = False
        self.call_active = True
        self.call_ended = False

    def _handle_call_end(self, payload: CallEnded):
        self.call_active = False
        self.connecting = False
        self.is_speaking = False
        self.call_ended = True
        if self.on_call_end:
            self.on_call_end(payload)

    def _handle_speech_start(self, payload: SpeechStarted):
        self.is_speaking = True

    def _handle_speech_end(self, payload: SpeechEnded):
        self.is_speaking = False

    def _handle_message(self, payload: VoiceMessage):
        chat = message_to_chat(payload)
        if chat:
            self.messages.append(chat)
        else:
            logger.debug("Unhandled message type: %s", payload.type)

    def _handle_error(self, payload: VoiceError):
        logger.error("Voice call error: %s", payload.message)
        self.last_error = payload.message
        self.connecting = False
        self.call_active = False


def translate_server_message(body: Dict[str, Any]) -> Optional[Tuple[VoiceEvent, BaseModel]]:
    """Map a Vapi server-webhook body onto ``(event, payload)``.

    Returns None for message types that have no event.
    """
    message = body.get("message") if isinstance(body.get("message"), dict) else body
    kind = message.get("type")
    call = message.get("call") if isinstance(message.get("call"), dict) else {}
    call_id = call.get("id")

    if kind == "status-update":
        status = message.get("status")
        if status == "in-progress":
            return VoiceEvent.CALL_START, CallStarted(call_id=call_id)
        # "ended" is left to the end-of-call-report so a call is counted once
        return None

    if kind == "end-of-call-report":
        return VoiceEvent.CALL_END, CallEnded(
            call_id=call_id,
            user_email=requester_email(call),
            ended_reason=message.get("endedReason"),
        )

    if kind == "speech-update":
        role = message.get("role") or "assistant"
        if message.get("status") == "started":
            return VoiceEvent.SPEECH_START, SpeechStarted(role=role)
        if message.get("status") == "stopped":
            return VoiceEvent.SPEECH_END, SpeechEnded(role=role)
        return None

    if kind == "transcript":
        return VoiceEvent.MESSAGE, VoiceMessage.model_validate(message)

    if kind == "conversation-update":
        # only the newest entry is new to subscribers
        messages = message.get("messages")
        latest = messages[-1] if isinstance(messages, list) and messages else None
        if not isinstance(latest, dict):
            return None
        text = latest.get("message") or latest.get("content")
        role = latest.get("role")
        return VoiceEvent.MESSAGE, VoiceMessage(
            type=kind,
            role=role if isinstance(role, str) else None,
            message=text if isinstance(text, str) else None,
        )

    if kind == "error" or message.get("error"):
        return VoiceEvent.ERROR, VoiceError(message=str(message.get("error") or "Unknown error"), call_id=call_id)

    return None

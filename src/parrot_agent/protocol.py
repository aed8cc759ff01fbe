"""
Open Floor Protocol Helpers

Thin helpers over the `openfloor` package for the pieces the parrot agent
needs that the package does not ship: validating an inbound payload,
building a plain-text utterance, classifying events, and reading the
text feature of an utterance.
"""

import copy
import json
from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from openfloor import (
    DialogEvent,
    Event,
    Feature,
    GetManifestsEvent,
    JsonSerializable,
    Payload,
    TextFeature,
    To,
    Token,
    UtteranceEvent,
)
from pydantic import TypeAdapter, ValidationError
from typing_extensions import NotRequired, TypedDict


TEXT_FEATURE = "text"


class ProtocolError(ValueError):
    """Raised when an event does not carry the structure its type requires."""


class EventKind(Enum):
    """The event kinds the parrot agent dispatches on."""
    UTTERANCE = "utterance"
    GET_MANIFESTS = "get_manifests"
    OTHER = "other"


# Required structure of an inbound payload. `openfloor` fills in missing
# fields (conversation id, schema version) instead of rejecting them.

class _SchemaShape(TypedDict):
    version: str


class _ConversationShape(TypedDict):
    id: str


class _SenderShape(TypedDict):
    speakerUri: str
    serviceUrl: NotRequired[str]


class _ToShape(TypedDict, total=False):
    speakerUri: str
    serviceUrl: str
    private: bool


class _EventShape(TypedDict):
    eventType: str
    to: NotRequired[_ToShape]
    reason: NotRequired[str]
    parameters: NotRequired[dict[str, Any]]


class _EnvelopeShape(TypedDict):
    schema: _SchemaShape
    conversation: _ConversationShape
    sender: _SenderShape
    events: list[_EventShape]


class _PayloadShape(TypedDict):
    openFloor: _EnvelopeShape


_payload_shape = TypeAdapter(_PayloadShape)


@dataclass
class ValidationResult:
    """Outcome of `validate_and_parse_payload`."""
    valid: bool
    payload: Optional[Payload] = None
    errors: list[str] = field(default_factory=list)


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    if not location:
        return error["msg"]
    return f"{location}: {error['msg']}"


def validate_and_parse_payload(json_text: str | bytes) -> ValidationResult:
    """
    Validate a JSON document and parse it into an `openfloor.Payload`.

    Never raises: undecodable bytes, malformed JSON, missing required
    fields and values `openfloor` refuses are all reported as
    `valid=False` with one readable message per problem.
    """
    if isinstance(json_text, bytes):
        try:
            json_text = json_text.decode("utf-8")
        except UnicodeDecodeError as e:
            return ValidationResult(valid=False, errors=[f"Invalid UTF-8: {e}"])

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        return ValidationResult(valid=False, errors=[f"Invalid JSON: {e}"])

    try:
        _payload_shape.validate_python(data)
    except ValidationError as e:
        return ValidationResult(
            valid=False,
            errors=[_format_error(error) for error in e.errors()],
        )

    try:
        payload = Payload.from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        return ValidationResult(valid=False, errors=[f"openFloor: {e}"])

    return ValidationResult(valid=True, payload=payload)


def to_object(value: JsonSerializable) -> dict[str, Any]:
    """JSON-ready dict for any `openfloor` object."""
    return json.loads(value.to_json())


def event_kind(event: Event) -> EventKind:
    """Classify an event for dispatch."""
    if event.eventType == UtteranceEvent.eventType:
        return EventKind.UTTERANCE
    if event.eventType == GetManifestsEvent.eventType:
        return EventKind.GET_MANIFESTS
    return EventKind.OTHER


def get_text_feature(event: Event) -> Optional[Feature]:
    """
    Return the `text` feature of an utterance, or None if it has none.

    Only the text feature is parsed; other features are left as they
    arrived. Raises ProtocolError when the event has no dialog event.
    """
    dialog_event = event.parameters.get("dialogEvent")
    if isinstance(dialog_event, DialogEvent):
        return dialog_event.features.get(TEXT_FEATURE)
    if not isinstance(dialog_event, dict):
        raise ProtocolError(f"{event.eventType} event has no dialogEvent")

    raw_feature = (dialog_event.get("features") or {}).get(TEXT_FEATURE)
    if raw_feature is None:
        return None
    # from_dict rewrites the dict it is given
    return Feature.from_dict(copy.deepcopy(raw_feature))


def create_text_utterance(
    speaker_uri: str,
    text: str,
    to: To | None = None,
    confidence: float | None = None,
    lang: str | None = None,
    start_time: datetime | None = None,
) -> UtteranceEvent:
    """
    Build an utterance event carrying a single plain-text token.

    Args:
        speaker_uri: Speaker of the utterance (the replying agent)
        text: Text of the utterance
        to: Optional addressing for the event
        confidence: Optional token confidence in [0, 1]
        lang: Optional language tag for the text feature
        start_time: Span start; defaults to now

    Returns:
        UtteranceEvent ready to be placed in an envelope
    """
    dialog_event = DialogEvent(
        speakerUri=speaker_uri,
        features={
            TEXT_FEATURE: TextFeature(
                tokens=[Token(value=text, confidence=confidence)],
                lang=lang,
            )
        },
    )
    if start_time is not None:
        # Span() always stamps "now", so the start time is set afterwards.
        dialog_event.span.startTime = start_time
    return UtteranceEvent(to=to, dialogEvent=dialog_event)

"""
Parrot Agent - Open Floor echo agent

Receives an Open Floor envelope, answers every utterance addressed to it
by repeating the text with a parrot prefix, and answers `getManifests`
requests with its manifest. Everything else is ignored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog
from openfloor import (
    BotAgent,
    Conversation,
    Envelope,
    Event,
    Manifest,
    Parameters,
    PublishManifestsEvent,
    Schema,
    Sender,
    To,
)

from parrot_agent.card import (
    DEFAULT_NAME,
    DEFAULT_ORGANIZATION,
    DEFAULT_SYNOPSIS,
    get_manifest,
)
from parrot_agent.protocol import (
    EventKind,
    create_text_utterance,
    event_kind,
    get_text_feature,
)

logger = structlog.get_logger()

PARROT_PREFIX = "🦜 "
NO_TEXT_REPLY = "🦜 *chirp* I can only repeat text messages!"
CONFUSED_REPLY = "🦜 *confused chirp* Something went wrong while trying to repeat that!"


class EchoStatus(str, Enum):
    ECHOED = "echoed"
    NO_TEXT = "no_text"
    RECOVERED = "recovered"


@dataclass(frozen=True)
class EchoResult:
    """Reply produced for one utterance, and how it was produced."""
    event: Event
    status: EchoStatus
    error: Optional[str] = None


class ParrotAgent(BotAgent):
    """
    Open Floor agent that repeats whatever it is told.

    Replaces BotAgent's envelope handling: replies are collected into a new
    envelope and the agent keeps no per-conversation state, so one instance
    can serve concurrent requests.
    """

    def __init__(self, manifest: Manifest):
        super().__init__(manifest)

    @property
    def manifest(self) -> Manifest:
        return self._manifest

    @property
    def identity(self) -> Sender:
        return Sender(speakerUri=self.speakerUri, serviceUrl=self.serviceUrl)

    def process_envelope(self, in_envelope: Envelope) -> Envelope:
        """
        Build the reply envelope for an inbound envelope.

        Events are handled in order and replies keep that order. Every reply
        is addressed to the inbound sender. Per-event failures are turned
        into canned replies, so this always returns an envelope.

        Args:
            in_envelope: Validated inbound envelope

        Returns:
            New envelope with this agent as sender and zero or more events
        """
        response_events: list[Event] = []

        for event, metadata in self.add_metadata(in_envelope.events):
            if not metadata["addressed_to_me"]:
                logger.debug("event_not_addressed", event_type=event.eventType)
                continue

            kind = event_kind(event)
            if kind is EventKind.UTTERANCE:
                result = self._handle_utterance(event, in_envelope)
                logger.info("utterance_handled", status=result.status.value, error=result.error)
                response_events.append(result.event)
            elif kind is EventKind.GET_MANIFESTS:
                response_events.append(self._publish_manifests(in_envelope))
            else:
                logger.debug("event_ignored", event_type=event.eventType)

        logger.info(
            "envelope_processed",
            conversation_id=in_envelope.conversation.id,
            sender=in_envelope.sender.speakerUri,
            events_in=len(in_envelope.events),
            events_out=len(response_events),
        )

        return Envelope(
            schema=Schema(version=in_envelope.schema.version),
            conversation=Conversation(id=in_envelope.conversation.id),
            sender=self.identity,
            events=response_events,
        )

    def _reply_to(self, in_envelope: Envelope) -> To:
        return To(speakerUri=in_envelope.sender.speakerUri)

    def _publish_manifests(self, in_envelope: Envelope) -> Event:
        return PublishManifestsEvent(
            to=self._reply_to(in_envelope),
            parameters=Parameters({"servicingManifests": [self.manifest]}),
        )

    def _handle_utterance(self, event: Event, in_envelope: Envelope) -> EchoResult:
        """Echo an utterance back to the sender of the envelope."""
        to = self._reply_to(in_envelope)
        try:
            text_feature = get_text_feature(event)

            if text_feature is None or not text_feature.tokens:
                return EchoResult(
                    event=create_text_utterance(
                        speaker_uri=self.speakerUri,
                        text=NO_TEXT_REPLY,
                        to=to,
                    ),
                    status=EchoStatus.NO_TEXT,
                )

            # Tokens carry their own whitespace; valueUrl-only tokens add nothing.
            original_text = "".join(
                "" if token.value is None else str(token.value)
                for token in text_feature.tokens
            )

            return EchoResult(
                event=create_text_utterance(
                    speaker_uri=self.speakerUri,
                    text=f"{PARROT_PREFIX}{original_text}",
                    to=to,
                    confidence=1.0,
                ),
                status=EchoStatus.ECHOED,
            )
        except Exception as e:
            logger.exception(
                "utterance_echo_failed",
                sender=in_envelope.sender.speakerUri,
                error=str(e),
            )
            return EchoResult(
                event=create_text_utterance(
                    speaker_uri=self.speakerUri,
                    text=CONFUSED_REPLY,
                    to=to,
                ),
                status=EchoStatus.RECOVERED,
                error=str(e),
            )


def create_parrot_agent(
    speaker_uri: str,
    service_url: str,
    name: str = DEFAULT_NAME,
    organization: str = DEFAULT_ORGANIZATION,
    description: str = DEFAULT_SYNOPSIS,
) -> ParrotAgent:
    """
    Factory function to create a ParrotAgent.

    Args:
        speaker_uri: Unique speaker URI of this agent instance
        service_url: URL where the agent receives Open Floor envelopes
        name: Conversational name for the manifest
        organization: Organization for the manifest
        description: Synopsis for the manifest

    Returns:
        Configured ParrotAgent instance
    """
    manifest = get_manifest(
        speaker_uri=speaker_uri,
        service_url=service_url,
        name=name,
        organization=organization,
        description=description,
    )
    return ParrotAgent(manifest)

"""
Pytest configuration for parrot agent tests.
"""

import copy
from typing import Any

import pytest
from openfloor import Envelope, Payload

from parrot_agent.agent import create_parrot_agent


AGENT_SPEAKER_URI = "tag:parrot.test,2025:parrot-agent"
AGENT_SERVICE_URL = "https://parrot.test/openfloor"
CLIENT_SPEAKER_URI = "tag:client.test,2025:convener"


@pytest.fixture
def parrot():
    """A parrot agent with a fixed test identity."""
    return create_parrot_agent(
        speaker_uri=AGENT_SPEAKER_URI,
        service_url=AGENT_SERVICE_URL,
        name="Test Parrot",
        organization="Test Org",
        description="Parrot used in tests",
    )


@pytest.fixture
def payload_dict():
    """Build a raw Open Floor payload dict around a list of event dicts."""
    def _build(events: list[dict[str, Any]], conversation_id: str = "conv-42") -> dict[str, Any]:
        return {
            "openFloor": {
                "schema": {"version": "1.0.0"},
                "conversation": {"id": conversation_id},
                "sender": {
                    "speakerUri": CLIENT_SPEAKER_URI,
                    "serviceUrl": "https://client.test/",
                },
                "events": events,
            }
        }
    return _build


@pytest.fixture
def make_envelope(payload_dict):
    """Build a validated Envelope around a list of event dicts."""
    def _build(events: list[dict[str, Any]], conversation_id: str = "conv-42") -> Envelope:
        return Payload.from_dict(copy.deepcopy(payload_dict(events, conversation_id))).openFloor
    return _build


@pytest.fixture
def utterance():
    """Build a raw utterance event dict from text tokens."""
    def _build(tokens: list[str], to: dict[str, Any] | None = None) -> dict[str, Any]:
        event: dict[str, Any] = {
            "eventType": "utterance",
            "parameters": {
                "dialogEvent": {
                    "speakerUri": CLIENT_SPEAKER_URI,
                    "span": {"startTime": "2025-06-01T12:00:00+00:00"},
                    "features": {
                        "text": {
                            "mimeType": "text/plain",
                            "tokens": [{"value": token} for token in tokens],
                        }
                    },
                }
            },
        }
        if to is not None:
            event["to"] = to
        return event
    return _build

"""
Manifest Definition for the Parrot Agent

Defines the identification and capabilities the parrot agent publishes
in answer to Open Floor `getManifests` requests.
"""

from openfloor import Capability, Identification, Manifest


DEFAULT_NAME = "Parrot Agent"
DEFAULT_ORGANIZATION = "OpenFloor Demo"
DEFAULT_SYNOPSIS = "A simple parrot agent that echoes back messages with a parrot emoji"

PARROT_KEYPHRASES = ["echo", "repeat", "parrot", "say"]
PARROT_DESCRIPTIONS = [
    "Echoes back any text message with a parrot emoji",
    "Repeats user input verbatim",
    "Simple text mirroring functionality",
]


def get_manifest(
    speaker_uri: str,
    service_url: str,
    name: str = DEFAULT_NAME,
    organization: str = DEFAULT_ORGANIZATION,
    description: str = DEFAULT_SYNOPSIS,
) -> Manifest:
    """
    Create the Manifest for the parrot agent.

    Args:
        speaker_uri: Unique speaker URI of this agent instance
        service_url: URL where the agent receives Open Floor envelopes
        name: Conversational name shown to other agents
        organization: Organization operating the agent
        description: One-line synopsis

    Returns:
        Manifest with identification and the echo capability
    """
    return Manifest(
        identification=Identification(
            speakerUri=speaker_uri,
            serviceUrl=service_url,
            organization=organization,
            conversationalName=name,
            synopsis=description,
        ),
        capabilities=[
            Capability(
                keyphrases=list(PARROT_KEYPHRASES),
                descriptions=list(PARROT_DESCRIPTIONS),
            ),
        ],
    )

"""
Parrot Agent for the Open Floor protocol.

A minimal demonstration agent that repeats every text utterance addressed
to it with a parrot prefix and answers manifest discovery requests.
"""

from parrot_agent.agent import ParrotAgent, create_parrot_agent

__all__ = ["ParrotAgent", "create_parrot_agent"]

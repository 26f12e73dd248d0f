"""
Adapters for the relay's hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle the outbound HTTP calls.
"""

from .homeassistant.client import HAClient
from .slack.client import SlackClient

__all__ = ["HAClient", "SlackClient"]

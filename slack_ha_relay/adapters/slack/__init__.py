"""
Slack Web API adapter for the relay.

This module provides the reply sender posting agent answers back to
Slack channels, and the request signature check for inbound events.
"""

from .client import SlackClient
from .signature import verify_slack_signature

__all__ = ["SlackClient", "verify_slack_signature"]

"""
Home Assistant adapter for the relay.

This module provides the conversation agent client.
"""

from .client import HAClient

__all__ = ["HAClient"]

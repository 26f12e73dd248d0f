"""
Orchestrators for the relay.

This module contains the dispatcher that coordinates the flow between
the in-memory core and the outbound adapters.
"""
from .dispatcher import EventDispatcher

__all__ = ["EventDispatcher"]

"""Slack to Home Assistant conversation relay."""

__version__ = "0.1.0"

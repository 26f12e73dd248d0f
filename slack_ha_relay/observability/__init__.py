"""
Observability for the relay.

Logging setup, Prometheus metrics and the HTTP application.
"""

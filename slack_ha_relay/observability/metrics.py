"""
Metrics definitions for the relay.

This module defines Prometheus metrics for monitoring
event intake, deduplication and the outbound calls.
"""

from prometheus_client import Counter, Histogram, Gauge

# 카운터 메트릭
events_received = Counter(
    "slack_events_received_total",
    "Number of inbound Slack requests",
    ["kind"]
)

events_duplicate = Counter(
    "slack_events_duplicate_total",
    "Number of redelivered Slack events dropped by event_id"
)

events_filtered = Counter(
    "slack_events_filtered_total",
    "Number of events dropped before reaching the agent",
    ["reason"]
)

agent_calls = Counter(
    "agent_calls_total",
    "Home Assistant conversation calls",
    ["outcome"]
)

replies_sent = Counter(
    "replies_sent_total",
    "Slack reply deliveries",
    ["outcome"]
)

# 히스토그램 메트릭
agent_call_seconds = Histogram(
    "agent_call_duration_seconds",
    "Time spent waiting on the conversation agent",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# 게이지 메트릭
dedup_set_size = Gauge(
    "dedup_set_size",
    "Current number of event ids in the dedup window"
)

conversation_sessions = Gauge(
    "conversation_sessions",
    "Current number of stored channel sessions (live or stale)"
)

inflight_events = Gauge(
    "inflight_events",
    "Events dispatched and not yet finished"
)

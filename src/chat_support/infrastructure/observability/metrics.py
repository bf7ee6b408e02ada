"""
Prometheus metrics.

Add new metrics following this pattern.
"""
from prometheus_client import Counter, Histogram, Gauge


# Request metrics
REQUEST_COUNT = Counter(
    "chat_support_requests_total",
    "Total requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "chat_support_request_latency_seconds",
    "Request latency",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Queue metrics
CHAT_QUEUE_SIZE = Gauge(
    "chat_queue_size",
    "Queued plus active chat sessions",
)

CHAT_ADMISSIONS_TOTAL = Counter(
    "chat_admissions_total",
    "Start-chat requests by outcome",
    ["outcome"],  # main, overflow_buffer, rejected
)

CHAT_ASSIGNMENTS_TOTAL = Counter(
    "chat_assignments_total",
    "Sessions bound to an agent",
    ["seniority"],
)

CHAT_SESSIONS_EXPIRED_TOTAL = Counter(
    "chat_sessions_expired_total",
    "Sessions removed after polling lapsed",
    ["status"],
)

# Shift metrics
OVERFLOW_ACTIVE = Gauge(
    "chat_overflow_active",
    "1 while the overflow team is on shift",
)

AGENTS_ON_SHIFT = Gauge(
    "chat_agents_on_shift",
    "Agents currently on shift",
)

# Monitoring loop metrics
MONITOR_CYCLE_DURATION_SECONDS = Histogram(
    "chat_monitor_cycle_duration_seconds",
    "Duration of one monitoring cycle",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
)

MONITOR_CYCLE_ERRORS_TOTAL = Counter(
    "chat_monitor_cycle_errors_total",
    "Monitoring cycles that raised",
)

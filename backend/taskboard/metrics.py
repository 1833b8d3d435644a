"""Prometheus collectors shared by the HTTP layer and the services."""
from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "taskboard_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "taskboard_request_latency_seconds", "Latency of HTTP requests", ["method", "path"]
)

# Application-level domain metrics
ACCESS_DENIED_COUNT = Counter(
    "taskboard_access_denied_total", "Task operations rejected by the authorization policy", ["operation", "reason"]
)
TASK_MUTATION_COUNT = Counter(
    "taskboard_task_mutations_total", "Successful task mutations", ["operation"]
)

"""Canonical logging field names for consistent structured logs.

These constants define a stable key set for structured logs and context
propagation across the adapter, service and CLI layers.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Envelope/correlation fields.
TRACE_ID = "trace_id"
ENVELOPE_ID = "envelope_id"
PRINCIPAL = "principal"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
WARNINGS = "warnings"

# Remote store fields.
PATH = "path"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"

"""Shared error code constants.

Generic codes live at the top; lifecycle codes for the AppRole role service
follow. Service-local codes that nothing else reports should stay in the
service module.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
INVALID_PATH = "INVALID_PATH"
INVALID_CIDR = "INVALID_CIDR"

# Not found
NOT_FOUND = "NOT_FOUND"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

# Conflict
CONFLICT = "CONFLICT"
IMMUTABLE_FIELD_CHANGED = "IMMUTABLE_FIELD_CHANGED"

# Policy / authorization
POLICY_VIOLATION = "POLICY_VIOLATION"

# Dependency / external system
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
REMOTE_WRITE_FAILED = "REMOTE_WRITE_FAILED"
REMOTE_READ_FAILED = "REMOTE_READ_FAILED"
REMOTE_DELETE_FAILED = "REMOTE_DELETE_FAILED"
PARTIAL_CREATE_FAILED = "PARTIAL_CREATE_FAILED"
IDENTIFIER_UPDATE_FAILED = "IDENTIFIER_UPDATE_FAILED"

# Warnings
CIDR_NOT_NETWORK_ADDRESS = "CIDR_NOT_NETWORK_ADDRESS"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"

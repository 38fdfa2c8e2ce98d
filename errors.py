# ─────────────────────────────────────────────────────────────────
# errors.py — Error Taxonomy
#
# SEPARATION OF CONCERNS:
# The registry, log store, executor and publishers raise these.
# They never build HTTP responses themselves — main.py registers
# one exception handler that turns any PulseError into
#   {"error": "<message>"} with the matching status code.
# ─────────────────────────────────────────────────────────────────


class PulseError(Exception):
    """Base class for every error the service reports to a client."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(PulseError):
    """A required field is missing or empty."""

    status_code = 400


class NotFoundError(PulseError):
    """No monitor with this id exists (within the tenant, if scoped)."""

    status_code = 404


class TenancyError(PulseError):
    """The x-channel header is missing."""

    status_code = 400


class ProbeFailure(PulseError):
    """
    The outbound probe itself failed: network error, DNS failure,
    invalid URL or timeout. No log is written.

    Reported as 502 so the task publisher treats the delivery as
    failed and may redeliver it.
    """

    status_code = 502


class PublishError(PulseError):
    """The task publisher refused or could not accept a task."""

    status_code = 502

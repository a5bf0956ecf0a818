"""Exceptions raised by the harvester and a helper to bucket browser failures."""


class LeadHarvestError(Exception):
    """Base class for harvester failures."""


class InitializationError(LeadHarvestError):
    """The browser could not be launched."""


class NotAuthenticated(LeadHarvestError):
    """The browser is not logged in to LinkedIn."""


class AlreadyRunning(LeadHarvestError):
    """A harvest is already in progress for this session."""


class NavigationError(LeadHarvestError):
    """A page navigation failed or timed out."""


class EvaluationError(LeadHarvestError):
    """A script evaluated in the page failed."""


def classify_error(error: Exception) -> str:
    """Classify an exception into an error type category.

    Args:
        error: The exception that occurred

    Returns:
        Error type string: rate_limit, blocked, timeout, connection, or unknown
    """
    error_str = str(error).lower()
    error_type = type(error).__name__.lower()

    if any(x in error_str for x in ["429", "too many requests", "rate limit", "throttl"]):
        return "rate_limit"

    if any(x in error_str for x in ["403", "forbidden", "captcha", "checkpoint", "access denied"]):
        return "blocked"

    if any(x in error_str for x in ["timeout", "timed out"]) or "timeout" in error_type:
        return "timeout"

    if any(x in error_str for x in ["connection", "network", "dns", "refused"]) or "connection" in error_type:
        return "connection"

    return "unknown"

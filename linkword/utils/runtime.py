"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.

    lambda_deadline(context) -> float | None:
        Monotonic deadline derived from the remaining Lambda execution time.

Example:
    >>> from linkword.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os
import time
from typing import Any

from linkword.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


# Time reserved for building and returning the HTTP response
DEADLINE_SAFETY_MARGIN_SECONDS = 0.5


def running_locally() -> bool:
    """Check if the lambda is running locally via sam local invoke

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'


def lambda_deadline(context: Any) -> float | None:
    """Return a time.monotonic() deadline for the current Lambda invocation

    Args:
        context (Any):
            AWS Lambda context object. Test doubles and local invocations
            without get_remaining_time_in_millis() yield no deadline.

    Returns:
        float | None:
            Monotonic timestamp after which the caller no longer waits,
            or None if the context doesn't expose the remaining time.

    Example:
        >>> context.get_remaining_time_in_millis()
        3000
        >>> lambda_deadline(context) - time.monotonic()
        2.5
    """
    remaining = getattr(context, 'get_remaining_time_in_millis', None)
    if not callable(remaining):
        return None
    return time.monotonic() + remaining() / 1000 - DEADLINE_SAFETY_MARGIN_SECONDS

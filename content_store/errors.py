"""
Error kinds raised by the content store and the request handlers.

Each carries the HTTP status the API answers with, so routes never need to
inspect messages to tell a missing record from a failing backend.
"""

from typing import Optional


class OnboardingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(OnboardingError):
    """Required input fields are missing (client's fault)."""
    status_code = 400


class Unauthorized(OnboardingError):
    """Shared secret missing or wrong."""
    status_code = 401

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message)


class NotFound(OnboardingError):
    """No stored object for the key."""
    status_code = 404

    def __init__(self, message: str = 'Not found'):
        super().__init__(message)


class BackendError(OnboardingError):
    """
    The content store answered with a non-2xx, non-404 status, or could
    not be reached at all (status is None in that case).
    """
    status_code = 500

    def __init__(self, method: str, status: Optional[int], body: str):
        self.method = method
        self.status = status
        self.body = body
        if status is None:
            message = f"GitHub {method} failed: {body}"
        else:
            message = f"GitHub {method} failed: {status} {body}"
        super().__init__(message)

"""
Auth Module for the Onboarding API
Domain: Optional shared-secret gate

When API_KEY is configured, every request must carry it in the x-api-key
header. The GitHub token itself never leaves the server.
"""

import secrets
import sys
from typing import Optional

from flask import request, jsonify

from content_store.errors import Unauthorized

API_KEY_HEADER = 'x-api-key'


def api_key_matches(expected: str, provided: Optional[str]) -> bool:
    """Constant-time comparison of the shared secret."""
    if not provided:
        return False
    return secrets.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


def check_api_key(expected: str):
    """
    Shared-secret check for before_request.
    Returns None if OK, or (response, status) if denied.
    """
    # No secret configured - allow all
    if not expected:
        return None

    # CORS preflight never carries custom headers
    if request.method == 'OPTIONS':
        return None

    if api_key_matches(expected, request.headers.get(API_KEY_HEADER)):
        return None

    print(f"[AUTH] Rejected {request.method} {request.path} from {request.remote_addr}",
          file=sys.stderr, flush=True)
    err = Unauthorized()
    return jsonify({'error': err.message}), err.status_code


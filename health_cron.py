#!/usr/bin/env python3
"""
Health probe cron worker for the onboarding API.
Run via Railway/Render cron or any external scheduler.

Env:
  ONBOARDING_API_URL  base URL of the deployed API (default http://localhost:8787)
  API_KEY             shared secret, sent as x-api-key when set
"""

import os
import sys
import requests

ONBOARDING_API_URL = os.environ.get('ONBOARDING_API_URL', 'http://localhost:8787')
TIMEOUT_SECONDS = 30


def check_health(base_url, api_key=None, session=None) -> bool:
    """GET /health and report whether the API answered {"ok": true}."""
    http = session or requests
    headers = {'x-api-key': api_key} if api_key else {}
    url = f"{base_url.rstrip('/')}/health"
    try:
        response = http.get(url, headers=headers, timeout=TIMEOUT_SECONDS)
        if response.status_code != 200:
            print(f"[HEALTH] FAILED: {url} returned {response.status_code}", file=sys.stderr)
            return False
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        print(f"[HEALTH] FAILED: {e}", file=sys.stderr)
        return False

    if not isinstance(data, dict) or data.get('ok') is not True:
        print(f"[HEALTH] FAILED: unexpected body {data!r}", file=sys.stderr)
        return False

    print(f"[HEALTH] OK - {url}")
    return True


def main():
    """Ping the health endpoint; exit non-zero when unhealthy."""
    healthy = check_health(ONBOARDING_API_URL, api_key=os.environ.get('API_KEY') or None)
    sys.exit(0 if healthy else 1)


if __name__ == '__main__':
    main()

#!/usr/bin/env python3
"""
MWZ Onboarding API - GitHub-backed save/load for the onboarding frontend

Endpoints:
  GET  /health       -> {"ok": true}
  POST /save         -> {profile, checks} => commits <GITHUB_DIR>/<slug>.json (upsert)
  GET  /load/<slug>  -> returns the saved JSON from the repo

The GitHub token stays server-side. Set API_KEY to require a shared secret
(x-api-key header) on every route.

Usage:
  export GITHUB_TOKEN=... GITHUB_OWNER=... GITHUB_REPO=...
  python app.py
  # or: gunicorn 'app:create_app()'
"""

import sys

from flask import Flask, jsonify
from flask_cors import CORS

from auth import check_api_key
from content_store import ContentStoreClient
from onboarding.routes import init_onboarding
from settings import Settings, SettingsError, load_settings


def create_app(settings: Settings = None, session=None) -> Flask:
    """
    Build the Flask app.

    Args:
        settings: Configuration (loaded from the environment when omitted)
        session: HTTP session for GitHub calls (a requests.Session by default)
    """
    if settings is None:
        settings = load_settings()

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = settings.max_body_bytes
    # Any origin, answered with a literal * rather than the echoed Origin
    CORS(app, send_wildcard=True)

    store = ContentStoreClient(settings, session=session)

    @app.before_request
    def before_request():
        """Optional shared-secret gate, ahead of every route."""
        return check_api_key(settings.api_key)

    # ==================== API ENDPOINTS ====================

    @app.route('/health', methods=['GET'])
    def health_check():
        """Liveness only; never touches GitHub."""
        return jsonify({'ok': True})

    app.register_blueprint(init_onboarding(store, settings))

    # ==================== ERRORS ====================

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({'error': f'Request body exceeds {settings.max_body_bytes} bytes'}), 413

    return app


def main():
    try:
        settings = load_settings()
    except SettingsError as e:
        print(f"[STARTUP] {e}", file=sys.stderr, flush=True)
        sys.exit(1)

    app = create_app(settings)
    auth_mode = 'x-api-key required' if settings.auth_enabled else 'open'
    print(f"[STARTUP] MWZ Onboarding API listening on :{settings.port} "
          f"({settings.owner}/{settings.repo}@{settings.branch}, dir={settings.directory}, {auth_mode})",
          flush=True)
    app.run(host='0.0.0.0', port=settings.port, debug=False)


if __name__ == '__main__':
    main()

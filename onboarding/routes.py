"""
Onboarding Routes

POST /save          - Upsert { profile, checks } as <dir>/<slug>.json
GET  /load/<slug>   - Return the saved JSON exactly as stored
"""

import sys
from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, make_response

from content_store import slugify, ValidationError, NotFound, BackendError

ENVELOPE_VERSION = 1


def _is_missing(value) -> bool:
    """Absent, null, or an empty/false scalar. Empty objects still count."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _now_iso() -> str:
    """UTC timestamp like 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _identity(profile):
    """The profile field the storage key is derived from."""
    if isinstance(profile, dict):
        return profile.get('discord')
    return None


def build_envelope(profile, checks, saved_at=None) -> dict:
    """Wrap a record in the persisted form."""
    return {
        'profile': profile,
        'checks': checks,
        'savedAt': saved_at or _now_iso(),
        'version': ENVELOPE_VERSION
    }


def parse_record(data):
    """
    Pull profile and checks out of a request body.

    Raises:
        ValidationError: either field is missing
    """
    if not isinstance(data, dict):
        data = {}
    profile = data.get('profile')
    checks = data.get('checks')
    if _is_missing(profile) or _is_missing(checks):
        raise ValidationError('Missing profile or checks')
    return profile, checks


def init_onboarding(store, settings):
    """Initialize onboarding blueprint with a content store client and settings."""

    onboarding_bp = Blueprint('onboarding', __name__)

    # ------------------------------------------------------------------
    # POST /save
    # ------------------------------------------------------------------

    @onboarding_bp.route('/save', methods=['POST'])
    def save():
        """
        Upsert an onboarding record.

        Request body:
            {"profile": {"discord": "Ann Bee", ...}, "checks": {...}}

        Returns 200:
            {"ok": true, "path": "saves/ann-bee.json", "commit": "<sha or null>"}
        """
        try:
            profile, checks = parse_record(request.get_json(silent=True))
        except ValidationError as e:
            return jsonify({'error': e.message}), e.status_code

        identity = _identity(profile)
        slug = slugify(identity)
        path = settings.storage_path(slug)
        payload = build_envelope(profile, checks)
        message = f'Onboarding save for {identity or slug}'

        try:
            result = store.upsert(path, payload, message)
        except ValidationError as e:
            return jsonify({'error': e.message}), e.status_code
        except BackendError as e:
            print(f"[SAVE] {path} failed: {e}", file=sys.stderr, flush=True)
            return jsonify({'error': e.message}), e.status_code

        print(f"[SAVE] {path} commit={result.sha}", flush=True)

        return jsonify({
            'ok': True,
            'path': path,
            'commit': result.sha
        }), 200

    # ------------------------------------------------------------------
    # GET /load/<slug>
    # ------------------------------------------------------------------

    @onboarding_bp.route('/load/<slug>', methods=['GET'])
    def load(slug):
        """Return the stored envelope for a slug, passed through untouched."""
        path = settings.storage_path(slugify(slug))

        try:
            stored = store.fetch(path)
        except BackendError as e:
            print(f"[LOAD] {path} failed: {e}", file=sys.stderr, flush=True)
            return jsonify({'error': e.message}), e.status_code

        if stored is None:
            missing = NotFound()
            return jsonify({'error': missing.message}), missing.status_code

        try:
            content = stored.decoded()
        except ValueError as e:
            # Undecodable base64 or non-UTF-8 bytes in the stored file
            print(f"[LOAD] {path} unreadable: {e}", file=sys.stderr, flush=True)
            return jsonify({'error': f'Stored content at {path} is unreadable'}), 500

        response = make_response(content, 200)
        response.headers['Content-Type'] = 'application/json; charset=utf-8'
        return response

    return onboarding_bp

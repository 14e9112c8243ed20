"""
Content Store Module for the Onboarding API

This module handles:
- Storage key normalization (slugs)
- Reads and upserts against the GitHub contents API
- Typed errors for the request layer
"""

from content_store.keys import FALLBACK_KEY, slugify
from content_store.errors import (
    OnboardingError,
    ValidationError,
    Unauthorized,
    NotFound,
    BackendError
)
from content_store.client import ContentStoreClient, StoredObject, CommitResult

__all__ = [
    'FALLBACK_KEY', 'slugify',
    'OnboardingError', 'ValidationError', 'Unauthorized', 'NotFound', 'BackendError',
    'ContentStoreClient', 'StoredObject', 'CommitResult'
]

"""Firebase app initialisation and client accessors.

The Firestore client is the async one from firebase_admin; Cloud Storage
is the synchronous google-cloud-storage bucket, wrapped in threads by
BlobStorage.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore_async, storage

from ..config import FIREBASE_CREDENTIALS, FIREBASE_PROJECT_ID, FIREBASE_STORAGE_BUCKET

logger = logging.getLogger(__name__)


def init_firebase() -> firebase_admin.App:
    """Initialise the default Firebase app once (safe to call repeatedly)."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS and os.path.exists(FIREBASE_CREDENTIALS):
        logger.info("Initializing Firebase with service account credentials")
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    else:
        logger.info("Initializing Firebase with Application Default Credentials")
        cred = credentials.ApplicationDefault()

    options = {}
    if FIREBASE_STORAGE_BUCKET:
        options["storageBucket"] = FIREBASE_STORAGE_BUCKET
    if FIREBASE_PROJECT_ID:
        options["projectId"] = FIREBASE_PROJECT_ID

    return firebase_admin.initialize_app(cred, options)


def get_firestore():
    """Get the async Firestore client."""
    init_firebase()
    return firestore_async.client()


def get_bucket():
    """Get the default Cloud Storage bucket."""
    init_firebase()
    return storage.bucket()

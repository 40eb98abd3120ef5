"""
db/firestore.py

Firebase Admin app initialisation and the async Firestore client.
Uses firebase_admin.firestore_async (google-cloud-firestore AsyncClient).
"""

import firebase_admin
import structlog
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import AsyncClient

from config import settings

logger = structlog.get_logger(__name__)


def init_firebase_app() -> firebase_admin.App:
    """Initialise the default Firebase app once and return it."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if settings.firebase_credentials_path:
        cred = credentials.Certificate(settings.firebase_credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    app = firebase_admin.initialize_app(cred, options)
    logger.info(
        "firebase_app_initialized",
        project_id=settings.firebase_project_id or None,
        explicit_credentials=bool(settings.firebase_credentials_path),
    )
    return app


def get_firestore_client() -> AsyncClient:
    """Return an async Firestore client bound to the default Firebase app."""
    return firestore_async.client(init_firebase_app())

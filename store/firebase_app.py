"""
Purpose: One place to initialise the Firebase Admin SDK.
What it does:
Reads credentials from the environment (or a .env file) and returns the
shared firebase_admin App used by the Firestore store, the push client and
the auth client.

Example in .env:
FIREBASE_CREDENTIALS=/secrets/lifttogether-adminsdk.json
FIREBASE_PROJECT_ID=lifttogether-app
"""

import logging
import os
from typing import Optional

import firebase_admin
from dotenv import load_dotenv
from firebase_admin import credentials

load_dotenv()
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# firebase_admin's own name for the default app
DEFAULT_APP_NAME = "[DEFAULT]"

logger = logging.getLogger(__name__)


def get_firebase_app(name: Optional[str] = None) -> firebase_admin.App:
    """
    Re-use an already initialised app or initialise it once.
    Falls back to application default credentials when no service account
    file is configured (the normal case inside Google Cloud).
    """
    app_name = name or DEFAULT_APP_NAME
    try:
        return firebase_admin.get_app(app_name)
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS)
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    app = firebase_admin.initialize_app(cred, options, name=app_name)
    logger.info("Initialized Firebase app '%s'", app_name)
    return app

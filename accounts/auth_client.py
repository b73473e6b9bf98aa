#Purpose: The authentication "adapter/client".
#Sole responsibility: talk to Firebase Authentication and return normalized outputs.
#Encapsulates auth-specific details:
#account creation + session checks through the firebase_admin auth module
#email/password sign-in through the Identity Toolkit REST API (the Admin SDK has no sign-in)
#timeouts and error handling (everything surfaces as AuthError)
#It should not contain ride or matching rules.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests
from dotenv import load_dotenv
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from store.firebase_app import get_firebase_app

# Web API key of the Firebase project, needed for password sign-in.
# Example in .env:
# FIREBASE_WEB_API_KEY=AIzaSy...
load_dotenv()
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY")
IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Custom exception for authentication failures."""
    pass


class UserType(str, Enum):
    RIDER = "Rider"
    VOLUNTEER = "Volunteer"


@dataclass(frozen=True)
class Session:
    uid: str
    email: str
    id_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class AuthenticatedUser:
    uid: str
    email: Optional[str] = None
    is_authenticated: bool = True


class AuthClient:
    """
    Auth Adapter / Client

    `repository` stores the user profile (email + user type) next to the
    account, as the mobile app expects to find it in the users collection.
    """
    def __init__(self, repository, app=None, api_key: Optional[str] = None, timeout: int = 5):
        self.repository = repository
        self.app = app or get_firebase_app()
        self.api_key = api_key or FIREBASE_WEB_API_KEY
        self.timeout = timeout #seconds to wait for the Identity Toolkit before giving up

    def sign_up(self, email: str, password: str, user_type: UserType) -> str:
        """
        Create the account and its profile document. Returns the new uid.
        """
        try:
            user = auth.create_user(email=email, password=password, app=self.app)
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            raise AuthError(f"Failed to create user: {exc}") from exc

        self.repository.save_user_profile(user.uid, email, user_type.value)
        logger.info("Created %s account %s", user_type.value, user.uid)
        return user.uid

    def sign_in(self, email: str, password: str) -> Session:
        """
        calls the Identity Toolkit accounts:signInWithPassword endpoint and
        returns the session tokens
        """
        if not self.api_key:
            raise AuthError("Firebase web API key not set. Please set FIREBASE_WEB_API_KEY in the .env file.")

        try:
            response = requests.post(
                f"{IDENTITY_TOOLKIT_URL}/accounts:signInWithPassword",
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self.timeout,
            )
            data = response.json()
        except requests.RequestException as exc:
            raise AuthError(f"Failed to sign in: {exc}") from exc

        #validating the response
        if response.status_code != 200:
            message = data.get("error", {}).get("message", "Unknown error")
            raise AuthError(f"Failed to sign in: {message}")

        return Session(
            uid=data["localId"],
            email=data.get("email", email),
            id_token=data["idToken"],
            refresh_token=data["refreshToken"],
            expires_in=int(data.get("expiresIn", 3600)),
        )

    def sign_out(self, uid: str) -> None:
        """
        Revokes every refresh token of the user; their current ID tokens stop
        passing current_user() checks.
        """
        try:
            auth.revoke_refresh_tokens(uid, app=self.app)
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            raise AuthError(f"Failed to sign out {uid}: {exc}") from exc

    def current_user(self, id_token: str) -> AuthenticatedUser:
        try:
            claims = auth.verify_id_token(id_token, app=self.app, check_revoked=True)
        except (firebase_exceptions.FirebaseError, ValueError) as exc:
            raise AuthError(f"Invalid session: {exc}") from exc

        return AuthenticatedUser(uid=claims["uid"], email=claims.get("email"))

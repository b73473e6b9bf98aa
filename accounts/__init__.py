from .auth_client import AuthClient, AuthenticatedUser, AuthError, Session, UserType

__all__ = ["AuthClient", "AuthenticatedUser", "AuthError", "Session", "UserType"]

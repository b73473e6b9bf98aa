from rest_framework import authentication, exceptions

from accounts.auth_client import AuthError
from backend import services


class FirebaseTokenAuthentication(authentication.BaseAuthentication):
    """
    Authorization: Bearer <Firebase ID token>

    The verified user becomes request.user; the raw token becomes request.auth.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid bearer header.")

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid bearer header.")

        try:
            user = services.get_auth_client().current_user(token)
        except AuthError as exc:
            raise exceptions.AuthenticationFailed(str(exc))

        return (user, token)

    def authenticate_header(self, request):
        return self.keyword

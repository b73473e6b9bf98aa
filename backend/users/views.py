from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.auth_client import UserType
from backend import services
from .serializers import RegisterSerializer, SessionSerializer, SignInSerializer


class RegisterView(APIView):
    """
    Create a Firebase account plus its users/{uid} profile.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        uid = services.get_auth_client().sign_up(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
            UserType(serializer.validated_data["userType"]),
        )
        return Response(
            {"uid": uid, "email": serializer.validated_data["email"], "userType": serializer.validated_data["userType"]},
            status=status.HTTP_201_CREATED,
        )


class SignInView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = services.get_auth_client().sign_in(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        return Response(SessionSerializer(session).data)


class SignOutView(APIView):

    def post(self, request):
        services.get_auth_client().sign_out(request.user.uid)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserDetailView(APIView):
    """
    The signed-in user and, when one exists, their stored profile.
    """

    def get(self, request):
        profile = services.get_repository().get_user_profile(request.user.uid) or {}
        return Response({
            "uid": request.user.uid,
            "email": request.user.email or profile.get("email"),
            "userType": profile.get("userType"),
        })

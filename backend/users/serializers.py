from rest_framework import serializers

from accounts.auth_client import UserType


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    userType = serializers.ChoiceField(choices=[user_type.value for user_type in UserType])


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class SessionSerializer(serializers.Serializer):
    uid = serializers.CharField()
    email = serializers.EmailField()
    idToken = serializers.CharField(source="id_token")
    refreshToken = serializers.CharField(source="refresh_token")
    expiresIn = serializers.IntegerField(source="expires_in")

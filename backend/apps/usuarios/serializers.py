from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework import serializers
from .models import User


class MyTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['email'] = user.email
        token['role'] = user.role
        return token


class UserProfileSerializer(serializers.ModelSerializer):
    nombre_completo = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'nombre_completo', 'cedula', 'role']
        read_only_fields = ['id', 'username', 'email', 'cedula', 'role']


class UserBasicInfoSerializer(serializers.ModelSerializer):
    """Serializador simple para información básica del usuario"""
    nombre_completo = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'nombre_completo', 'role']
        read_only_fields = fields


class AdminUserUpdateSerializer(serializers.ModelSerializer):
    """
    Serializador especial para que el personal de titulación pueda actualizar usuarios,
    incluyendo el rol.
    """

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'cedula', 'role']
        read_only_fields = ['id']

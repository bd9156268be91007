from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView
from .serializers import MyTokenObtainPairSerializer, UserProfileSerializer, AdminUserUpdateSerializer
from .models import User, ROLES_PERSONAL
from .permissions import IsPersonalTitulacion


class CustomTokenObtainPairSerializer(MyTokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserProfileSerializer(self.user).data
        return data


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class UserProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data)

    def put(self, request):
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class AdminUserUpdateView(APIView):
    permission_classes = [IsPersonalTitulacion]

    def get(self, request, user_id):
        user = get_object_or_404(User, id=user_id)
        return Response(UserProfileSerializer(user).data)

    def put(self, request, user_id):
        """
        Permite al personal de titulación actualizar cualquier usuario, incluido su rol
        """
        user_to_update = get_object_or_404(User, id=user_id)
        serializer = AdminUserUpdateSerializer(user_to_update, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({
            "detail": f"Usuario {user_to_update.username} actualizado correctamente.",
            "user": UserProfileSerializer(user_to_update).data
        })


class UserListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        if request.user.role not in ROLES_PERSONAL + ('TUTOR', 'DOCENTE_INTEGRACION'):
            return Response(
                {"detail": "No tienes permiso para listar usuarios."},
                status=status.HTTP_403_FORBIDDEN
            )

        queryset = User.objects.all().order_by('last_name', 'first_name')

        rol = request.query_params.get('rol')
        if rol:
            queryset = queryset.filter(role=rol)

        serializer = UserProfileSerializer(queryset, many=True)
        return Response(serializer.data)

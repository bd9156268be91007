from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import CatalogoPrerequisito, EstudiantePrerequisito
from .serializers import (
    CatalogoPrerequisitoSerializer,
    EstudiantePrerequisitoSerializer,
    SubirPrerequisitoSerializer,
    ValidarPrerequisitoSerializer,
)
from .servicios import registrar_cumplimiento, validar_cumplimiento
from apps.usuarios.models import ROLES_PERSONAL
from apps.usuarios.permissions import IsPersonalOrReadOnly


class CatalogoPrerequisitoViewSet(viewsets.ModelViewSet):
    serializer_class = CatalogoPrerequisitoSerializer
    permission_classes = [IsPersonalOrReadOnly]

    def get_queryset(self):
        queryset = CatalogoPrerequisito.objects.all()
        if self.action == 'list' and self.request.query_params.get('todos') != 'true':
            queryset = queryset.filter(activo=True)
        return queryset


class EstudiantePrerequisitoViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = EstudiantePrerequisitoSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = EstudiantePrerequisito.objects.select_related('prerequisito', 'estudiante')

        if user.role in ROLES_PERSONAL:
            estudiante_id = self.request.query_params.get('estudiante')
            if estudiante_id:
                queryset = queryset.filter(estudiante__id=estudiante_id)
            return queryset

        return queryset.filter(estudiante=user)

    @action(detail=False, methods=['post'])
    def subir(self, request):
        datos = SubirPrerequisitoSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        cumplimiento, creado = registrar_cumplimiento(
            request.user,
            datos.validated_data['prerequisito'],
            datos.validated_data['archivo_url'],
        )
        return Response(
            EstudiantePrerequisitoSerializer(cumplimiento).data,
            status=status.HTTP_201_CREATED if creado else status.HTTP_200_OK
        )

    @action(detail=True, methods=['post'])
    def validar(self, request, pk=None):
        datos = ValidarPrerequisitoSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        cumplimiento = validar_cumplimiento(request.user, pk, datos.validated_data['cumplido'])
        return Response(EstudiantePrerequisitoSerializer(cumplimiento).data)

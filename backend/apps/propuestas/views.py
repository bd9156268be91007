from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Propuesta
from .serializers import (
    PropuestaSerializer,
    CrearPropuestaSerializer,
    RevisarPropuestaSerializer,
    AsignarTutorSerializer,
    TrabajoTitulacionSerializer,
    VotacionTutorSerializer,
    VotarTutorSerializer,
)
from .servicios import crear_propuesta, revisar_propuesta, asignar_tutor, propuesta_del_estudiante
from . import votaciones
from apps.usuarios.models import ROLES_PERSONAL
from apps.usuarios.permissions import IsEstudiante
from apps.usuarios.serializers import UserBasicInfoSerializer


class PropuestaViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PropuestaSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Propuesta.objects.select_related('estudiante').prefetch_related('trabajos_titulacion__tutor')

        if user.role in ROLES_PERSONAL or user.role == 'DOCENTE_INTEGRACION':
            estado = self.request.query_params.get('estado')
            if estado:
                queryset = queryset.filter(estado=estado)
            return queryset
        elif user.role == 'TUTOR':
            return queryset.filter(
                trabajos_titulacion__tutor=user,
                trabajos_titulacion__estado_asignacion='ACTIVO'
            )

        return queryset.filter(estudiante=user)

    def create(self, request):
        datos = CrearPropuestaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        propuesta = crear_propuesta(request.user, **datos.validated_data)
        return Response(PropuestaSerializer(propuesta).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def mia(self, request):
        propuesta = propuesta_del_estudiante(request.user)
        return Response(PropuestaSerializer(propuesta).data)

    @action(detail=True, methods=['post'])
    def revisar(self, request, pk=None):
        datos = RevisarPropuestaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        propuesta = revisar_propuesta(
            request.user,
            pk,
            datos.validated_data['estado'],
            datos.validated_data.get('comentarios'),
        )
        return Response(PropuestaSerializer(propuesta).data)

    @action(detail=True, methods=['post'], url_path='asignar-tutor')
    def asignar_tutor(self, request, pk=None):
        datos = AsignarTutorSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        trabajo = asignar_tutor(
            request.user,
            pk,
            datos.validated_data['tutor'],
            datos.validated_data.get('observaciones'),
        )
        return Response(TrabajoTitulacionSerializer(trabajo).data, status=status.HTTP_201_CREATED)


class VotacionTutorViewSet(viewsets.GenericViewSet):
    """
    Votación de tutores. Los estudiantes votan y eliminan sus votos;
    el personal consulta todas las votaciones y el resumen por tutor.
    """
    serializer_class = VotacionTutorSerializer

    def get_permissions(self):
        if self.action in ('create', 'destroy'):
            return [IsEstudiante()]
        return super().get_permissions()

    def get_queryset(self):
        return votaciones.todas_las_votaciones(self.request.user)

    def list(self, request):
        return Response(VotacionTutorSerializer(self.get_queryset(), many=True).data)

    def create(self, request):
        datos = VotarTutorSerializer(data=request.data)
        datos.is_valid(raise_exception=True)
        valores = datos.validated_data

        votacion, creada = votaciones.votar_tutor(
            request.user,
            valores['propuesta'],
            valores['tutor'],
            valores['prioridad'],
            valores.get('justificacion'),
        )
        return Response(
            VotacionTutorSerializer(votacion).data,
            status=status.HTTP_201_CREATED if creada else status.HTTP_200_OK
        )

    def destroy(self, request, pk=None):
        votaciones.eliminar_votacion(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path=r'estudiante/(?P<estudiante_id>\d+)')
    def por_estudiante(self, request, estudiante_id=None):
        resultado = votaciones.votaciones_estudiante(request.user, estudiante_id)
        return Response(VotacionTutorSerializer(resultado, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'propuesta/(?P<propuesta_id>\d+)')
    def por_propuesta(self, request, propuesta_id=None):
        resultado = votaciones.votaciones_propuesta(request.user, propuesta_id)
        return Response(VotacionTutorSerializer(resultado, many=True).data)

    @action(detail=False, methods=['get'], url_path=r'tutor/(?P<tutor_id>\d+)')
    def por_tutor(self, request, tutor_id=None):
        resultado = votaciones.votaciones_tutor(request.user, tutor_id)
        return Response(VotacionTutorSerializer(resultado, many=True).data)

    @action(detail=False, methods=['get'])
    def resumen(self, request):
        resumen = votaciones.resumen_votaciones(request.user)
        return Response([
            {'tutor': UserBasicInfoSerializer(fila['tutor']).data, 'votaciones': fila['votaciones']}
            for fila in resumen
        ])

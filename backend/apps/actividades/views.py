from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Actividad, Evidencia
from .serializers import (
    ActividadSerializer,
    CrearActividadSerializer,
    EvidenciaSerializer,
    EntregarEvidenciaSerializer,
    CalificarEvidenciaSerializer,
    EstadoRevisionSerializer,
    ComentarioSerializer,
    NuevoComentarioSerializer,
)
from . import servicios
from apps.propuestas.servicios import propuesta_del_estudiante
from apps.usuarios.models import ROLES_PERSONAL
from titulacion.excepciones import ErrorValidacion


class ActividadViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Actividades de una propuesta. Al listar se registran los ceros de las
    actividades vencidas sin entrega.
    """
    serializer_class = ActividadSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Actividad.objects.select_related('propuesta')

        if user.role in ROLES_PERSONAL or user.role == 'DOCENTE_INTEGRACION':
            return queryset
        elif user.role == 'TUTOR':
            return queryset.filter(
                propuesta__trabajos_titulacion__tutor=user,
                propuesta__trabajos_titulacion__estado_asignacion='ACTIVO'
            )
        return queryset.filter(propuesta__estudiante=user)

    def list(self, request):
        propuesta_id = request.query_params.get('propuesta')
        if propuesta_id is None:
            if request.user.role != 'ESTUDIANTE':
                raise ErrorValidacion('Debe indicar el parámetro propuesta')
            propuesta_id = propuesta_del_estudiante(request.user).id

        actividades = servicios.listar_actividades_propuesta(request.user, propuesta_id)
        return Response(ActividadSerializer(actividades, many=True).data)

    def create(self, request):
        datos = CrearActividadSerializer(data=request.data)
        datos.is_valid(raise_exception=True)
        valores = dict(datos.validated_data)

        actividad = servicios.crear_actividad(request.user, valores.pop('propuesta'), **valores)
        return Response(ActividadSerializer(actividad).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def evidencias(self, request, pk=None):
        evidencias = servicios.listar_evidencias_actividad(request.user, pk)
        return Response(EvidenciaSerializer(evidencias, many=True).data)

    @action(detail=True, methods=['post'])
    def entregar(self, request, pk=None):
        datos = EntregarEvidenciaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        evidencia = servicios.entregar_evidencia(
            request.user,
            pk,
            datos.validated_data['semana'],
            datos.validated_data.get('contenido'),
            datos.validated_data.get('archivo_url'),
        )
        return Response(EvidenciaSerializer(evidencia).data, status=status.HTTP_201_CREATED)


class EvidenciaViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = EvidenciaSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Evidencia.objects.select_related('actividad__propuesta').prefetch_related('comentarios__autor')

        if user.role in ROLES_PERSONAL or user.role == 'DOCENTE_INTEGRACION':
            return queryset
        elif user.role == 'TUTOR':
            return queryset.filter(
                actividad__propuesta__trabajos_titulacion__tutor=user,
                actividad__propuesta__trabajos_titulacion__estado_asignacion='ACTIVO'
            )
        return queryset.filter(actividad__propuesta__estudiante=user)

    def _calificar(self, request, pk, funcion):
        datos = CalificarEvidenciaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        evidencia = funcion(
            request.user,
            pk,
            datos.validated_data['calificacion'],
            datos.validated_data.get('feedback'),
        )
        return Response(EvidenciaSerializer(evidencia).data)

    @action(detail=True, methods=['post'], url_path='calificar-tutor')
    def calificar_tutor(self, request, pk=None):
        return self._calificar(request, pk, servicios.calificar_tutor)

    @action(detail=True, methods=['post'], url_path='calificar-docente')
    def calificar_docente(self, request, pk=None):
        return self._calificar(request, pk, servicios.calificar_docente)

    @action(detail=True, methods=['post'])
    def revision(self, request, pk=None):
        datos = EstadoRevisionSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        evidencia = servicios.actualizar_estado_revision(
            request.user,
            pk,
            datos.validated_data['estado'],
            datos.validated_data.get('comentario'),
        )
        return Response(EvidenciaSerializer(evidencia).data)

    @action(detail=True, methods=['post'])
    def comentarios(self, request, pk=None):
        datos = NuevoComentarioSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        comentario = servicios.agregar_comentario(request.user, pk, datos.validated_data['texto'])
        return Response(ComentarioSerializer(comentario).data, status=status.HTTP_201_CREATED)


class ResumenSemanalView(APIView):
    """Resumen de las 16 semanas de una propuesta (notas del docente de integración)."""

    def get(self, request, propuesta_id=None):
        if propuesta_id is None:
            propuesta_id = propuesta_del_estudiante(request.user).id
        return Response(servicios.resumen_semanal(request.user, propuesta_id))


class ResumenGeneralView(APIView):

    def get(self, request):
        return Response(servicios.resumen_semanal_todos(request.user))

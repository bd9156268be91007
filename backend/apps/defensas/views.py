from django.db.models import Q
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import EvaluacionDefensa
from .serializers import (
    EvaluacionDefensaSerializer,
    ParticipanteDefensaSerializer,
    CrearDefensaSerializer,
    ActualizarDefensaSerializer,
    AgregarParticipanteSerializer,
    CalificarDefensaSerializer,
    FinalizarDefensaSerializer,
)
from . import servicios
from apps.usuarios.models import ROLES_PERSONAL
from titulacion.excepciones import ErrorValidacion


class EvaluacionDefensaViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = EvaluacionDefensaSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = (
            EvaluacionDefensa.objects
            .select_related('propuesta', 'propuesta__estudiante')
            .prefetch_related('participantes__usuario')
        )

        if user.role not in ROLES_PERSONAL:
            queryset = queryset.filter(Q(propuesta__estudiante=user) | Q(participantes__usuario=user)).distinct()

        tipo = self.request.query_params.get('tipo')
        if tipo:
            queryset = queryset.filter(tipo=tipo)
        return queryset

    def retrieve(self, request, pk=None):
        evaluacion = servicios.obtener_detalle(request.user, pk)
        return Response(EvaluacionDefensaSerializer(evaluacion).data)

    def partial_update(self, request, pk=None):
        datos = ActualizarDefensaSerializer(data=request.data, partial=True)
        datos.is_valid(raise_exception=True)

        evaluacion = servicios.actualizar_programacion(request.user, pk, **datos.validated_data)
        return Response(EvaluacionDefensaSerializer(evaluacion).data)

    def _crear(self, request, funcion):
        datos = CrearDefensaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)
        valores = dict(datos.validated_data)

        evaluacion = funcion(request.user, valores.pop('propuesta'), **valores)
        return Response(EvaluacionDefensaSerializer(evaluacion).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def privada(self, request):
        return self._crear(request, servicios.crear_defensa_privada)

    @action(detail=False, methods=['post'])
    def publica(self, request):
        return self._crear(request, servicios.crear_defensa_publica)

    @action(detail=False, methods=['get'])
    def jurado(self, request):
        evaluaciones = servicios.defensas_jurado(request.user)
        return Response(EvaluacionDefensaSerializer(evaluaciones, many=True).data)

    @action(detail=False, methods=['get'], url_path='por-propuesta')
    def por_propuesta(self, request):
        propuesta_id = request.query_params.get('propuesta')
        if not propuesta_id:
            raise ErrorValidacion('Debe indicar el parámetro propuesta')
        evaluaciones = servicios.defensas_propuesta(request.user, propuesta_id)
        return Response(EvaluacionDefensaSerializer(evaluaciones, many=True).data)

    @action(detail=True, methods=['post'])
    def participantes(self, request, pk=None):
        datos = AgregarParticipanteSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        participante, creado = servicios.agregar_participante(
            request.user,
            pk,
            datos.validated_data['usuario'],
            datos.validated_data.get('tipo_participante'),
            datos.validated_data.get('rol', ''),
        )
        return Response(
            ParticipanteDefensaSerializer(participante).data,
            status=status.HTTP_201_CREATED if creado else status.HTTP_200_OK
        )

    @action(detail=True, methods=['post'])
    def calificar(self, request, pk=None):
        datos = CalificarDefensaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        participante, evaluacion = servicios.calificar_como_participante(
            request.user,
            pk,
            datos.validated_data['calificacion'],
            datos.validated_data.get('comentario'),
        )
        return Response({
            'participante': ParticipanteDefensaSerializer(participante).data,
            'evaluacion': EvaluacionDefensaSerializer(evaluacion).data,
        })

    @action(detail=True, methods=['post'])
    def finalizar(self, request, pk=None):
        datos = FinalizarDefensaSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        evaluacion = servicios.finalizar_defensa(
            request.user,
            pk,
            datos.validated_data['estado'],
            datos.validated_data.get('comentarios'),
        )
        return Response(EvaluacionDefensaSerializer(evaluacion).data)

    @action(detail=True, methods=['get'])
    def comentarios(self, request, pk=None):
        participantes = servicios.comentarios_tribunal(request.user, pk)
        return Response([
            {
                'usuario': p.usuario.nombre_completo,
                'rol': p.rol or p.tipo_participante,
                'calificacion': p.calificacion,
                'comentario': p.comentario,
            }
            for p in participantes
        ])

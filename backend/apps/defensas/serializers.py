from rest_framework import serializers
from .models import EvaluacionDefensa, ParticipanteDefensa
from apps.usuarios.serializers import UserBasicInfoSerializer


class ParticipanteDefensaSerializer(serializers.ModelSerializer):
    usuario_detail = UserBasicInfoSerializer(source='usuario', read_only=True)

    class Meta:
        model = ParticipanteDefensa
        fields = ['id', 'evaluacion', 'usuario', 'usuario_detail', 'tipo_participante', 'rol',
                  'calificacion', 'comentario', 'fecha_calificacion', 'fecha_asignacion']
        read_only_fields = fields


class EvaluacionDefensaSerializer(serializers.ModelSerializer):
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    propuesta_titulo = serializers.CharField(source='propuesta.titulo', read_only=True)
    estudiante_detail = UserBasicInfoSerializer(source='propuesta.estudiante', read_only=True)
    participantes = ParticipanteDefensaSerializer(many=True, read_only=True)

    class Meta:
        model = EvaluacionDefensa
        fields = ['id', 'propuesta', 'propuesta_titulo', 'estudiante_detail', 'tipo', 'tipo_display',
                  'fecha_defensa', 'hora_defensa', 'aula', 'estado', 'estado_display', 'calificacion',
                  'fecha_evaluacion', 'comentarios', 'fecha_creacion', 'participantes']
        read_only_fields = fields


class CrearDefensaSerializer(serializers.Serializer):
    propuesta = serializers.IntegerField()
    fecha_defensa = serializers.DateField(required=False, allow_null=True)
    hora_defensa = serializers.TimeField(required=False, allow_null=True)
    aula = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    comentarios = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ActualizarDefensaSerializer(serializers.Serializer):
    fecha_defensa = serializers.DateField(required=False, allow_null=True)
    hora_defensa = serializers.TimeField(required=False, allow_null=True)
    aula = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    # APROBADA y RECHAZADA se rechazan en el servicio; se cierran con finalizar
    estado = serializers.ChoiceField(choices=EvaluacionDefensa.ESTADO_CHOICES, required=False)
    comentarios = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AgregarParticipanteSerializer(serializers.Serializer):
    usuario = serializers.IntegerField()
    tipo_participante = serializers.CharField(max_length=20, required=False, allow_blank=True)
    rol = serializers.CharField(max_length=100, required=False, allow_blank=True)


class CalificarDefensaSerializer(serializers.Serializer):
    # El rango 0-10 se valida en el servicio
    calificacion = serializers.DecimalField(max_digits=5, decimal_places=2)
    comentario = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class FinalizarDefensaSerializer(serializers.Serializer):
    estado = serializers.CharField()
    comentarios = serializers.CharField(required=False, allow_blank=True, allow_null=True)

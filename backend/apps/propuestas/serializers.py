from rest_framework import serializers
from .models import Propuesta, TrabajoTitulacion, VotacionTutor
from apps.usuarios.serializers import UserBasicInfoSerializer


class TrabajoTitulacionSerializer(serializers.ModelSerializer):
    tutor_detail = UserBasicInfoSerializer(source='tutor', read_only=True)

    class Meta:
        model = TrabajoTitulacion
        fields = ['id', 'propuesta', 'tutor', 'tutor_detail', 'estado_asignacion', 'observaciones', 'fecha_asignacion']
        read_only_fields = fields


class PropuestaSerializer(serializers.ModelSerializer):
    estudiante_detail = UserBasicInfoSerializer(source='estudiante', read_only=True)
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    tutor = serializers.SerializerMethodField()

    class Meta:
        model = Propuesta
        fields = ['id', 'estudiante', 'estudiante_detail', 'titulo', 'area_conocimiento', 'descripcion',
                  'estado', 'estado_display', 'comentarios_revision', 'resultado_defensa', 'tutor',
                  'fecha_publicacion', 'ultima_modificacion']
        read_only_fields = fields

    def get_tutor(self, obj):
        trabajo = next(
            (t for t in obj.trabajos_titulacion.all() if t.estado_asignacion == 'ACTIVO'),
            None
        )
        return UserBasicInfoSerializer(trabajo.tutor).data if trabajo else None


class CrearPropuestaSerializer(serializers.Serializer):
    titulo = serializers.CharField(max_length=255)
    area_conocimiento = serializers.CharField(max_length=150)
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RevisarPropuestaSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=Propuesta.ESTADO_CHOICES)
    comentarios = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AsignarTutorSerializer(serializers.Serializer):
    tutor = serializers.IntegerField()
    observaciones = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class VotacionTutorSerializer(serializers.ModelSerializer):
    tutor_detail = UserBasicInfoSerializer(source='tutor', read_only=True)
    estudiante_detail = UserBasicInfoSerializer(source='estudiante', read_only=True)
    propuesta_titulo = serializers.CharField(source='propuesta.titulo', read_only=True)

    class Meta:
        model = VotacionTutor
        fields = ['id', 'propuesta', 'propuesta_titulo', 'estudiante', 'estudiante_detail', 'tutor',
                  'tutor_detail', 'prioridad', 'justificacion', 'fecha_votacion']
        read_only_fields = fields


class VotarTutorSerializer(serializers.Serializer):
    # La prioridad 1-3 se valida en el servicio
    propuesta = serializers.IntegerField()
    tutor = serializers.IntegerField()
    prioridad = serializers.IntegerField()
    justificacion = serializers.CharField(required=False, allow_blank=True, allow_null=True)

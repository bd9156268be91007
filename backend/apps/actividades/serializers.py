from rest_framework import serializers
from .models import Actividad, Evidencia, Comentario
from apps.usuarios.serializers import UserBasicInfoSerializer


class ComentarioSerializer(serializers.ModelSerializer):
    autor_detail = UserBasicInfoSerializer(source='autor', read_only=True)

    class Meta:
        model = Comentario
        fields = ['id', 'evidencia', 'autor', 'autor_detail', 'texto', 'fecha']
        read_only_fields = fields


class ActividadSerializer(serializers.ModelSerializer):
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)
    total_evidencias = serializers.IntegerField(source='evidencias.count', read_only=True)

    class Meta:
        model = Actividad
        fields = ['id', 'propuesta', 'nombre', 'descripcion', 'tipo', 'tipo_display', 'semana',
                  'fecha_activacion', 'fecha_entrega', 'requisitos', 'estado', 'creado_por',
                  'fecha_creacion', 'total_evidencias']
        read_only_fields = ['estado', 'creado_por', 'fecha_creacion']


class CrearActividadSerializer(serializers.Serializer):
    propuesta = serializers.IntegerField()
    nombre = serializers.CharField(max_length=200)
    tipo = serializers.ChoiceField(choices=Actividad.TIPO_CHOICES, default='TUTORIA')
    descripcion = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    semana = serializers.IntegerField(required=False, allow_null=True)
    fecha_activacion = serializers.DateTimeField(required=False, allow_null=True)
    fecha_entrega = serializers.DateTimeField(required=False, allow_null=True)
    requisitos = serializers.ListField(child=serializers.CharField(), required=False)


class EvidenciaSerializer(serializers.ModelSerializer):
    comentarios = ComentarioSerializer(many=True, read_only=True)

    class Meta:
        model = Evidencia
        fields = [
            'id', 'actividad', 'semana', 'contenido', 'archivo_url', 'estado', 'fecha_entrega',
            'calificacion_tutor', 'feedback_tutor', 'estado_revision_tutor', 'fecha_revision_tutor',
            'calificacion_docente', 'feedback_docente', 'estado_revision_docente', 'fecha_revision_docente',
            'ponderacion_tutor', 'ponderacion_docente', 'calificacion_final', 'es_automatica', 'comentarios',
        ]
        read_only_fields = fields


class EntregarEvidenciaSerializer(serializers.Serializer):
    # La semana se valida en el servicio para devolver el error de dominio
    semana = serializers.IntegerField()
    contenido = serializers.CharField(allow_blank=True, required=False, default='')
    archivo_url = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class CalificarEvidenciaSerializer(serializers.Serializer):
    calificacion = serializers.DecimalField(max_digits=4, decimal_places=2, allow_null=True)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class EstadoRevisionSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=['PENDIENTE', 'APROBADO', 'RECHAZADO'])
    comentario = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class NuevoComentarioSerializer(serializers.Serializer):
    texto = serializers.CharField()

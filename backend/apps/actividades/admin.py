from django.contrib import admin
from .models import Actividad, Evidencia, Comentario


@admin.register(Actividad)
class ActividadAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'propuesta', 'tipo', 'semana', 'fecha_entrega', 'estado')
    list_filter = ('tipo', 'estado')
    search_fields = ('nombre', 'propuesta__titulo')


class ComentarioInline(admin.TabularInline):
    model = Comentario
    extra = 0


@admin.register(Evidencia)
class EvidenciaAdmin(admin.ModelAdmin):
    list_display = ('actividad', 'semana', 'estado', 'calificacion_tutor', 'calificacion_docente',
                    'calificacion_final', 'es_automatica')
    list_filter = ('estado', 'estado_revision_tutor', 'estado_revision_docente', 'es_automatica')
    inlines = [ComentarioInline]

from django.contrib import admin
from .models import Propuesta, TrabajoTitulacion, VotacionTutor


class TrabajoTitulacionInline(admin.TabularInline):
    model = TrabajoTitulacion
    extra = 0


@admin.register(Propuesta)
class PropuestaAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'estudiante', 'estado', 'resultado_defensa', 'fecha_publicacion')
    list_filter = ('estado', 'resultado_defensa')
    search_fields = ('titulo', 'estudiante__username', 'estudiante__last_name')
    inlines = [TrabajoTitulacionInline]


@admin.register(TrabajoTitulacion)
class TrabajoTitulacionAdmin(admin.ModelAdmin):
    list_display = ('propuesta', 'tutor', 'estado_asignacion', 'fecha_asignacion')
    list_filter = ('estado_asignacion',)


@admin.register(VotacionTutor)
class VotacionTutorAdmin(admin.ModelAdmin):
    list_display = ('propuesta', 'estudiante', 'tutor', 'prioridad', 'fecha_votacion')
    list_filter = ('prioridad',)
    search_fields = ('estudiante__username', 'tutor__username', 'propuesta__titulo')

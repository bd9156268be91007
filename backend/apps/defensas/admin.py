from django.contrib import admin
from .models import EvaluacionDefensa, ParticipanteDefensa


class ParticipanteDefensaInline(admin.TabularInline):
    model = ParticipanteDefensa
    extra = 0


@admin.register(EvaluacionDefensa)
class EvaluacionDefensaAdmin(admin.ModelAdmin):
    list_display = ('propuesta', 'tipo', 'estado', 'fecha_defensa', 'hora_defensa', 'aula', 'calificacion')
    list_filter = ('tipo', 'estado')
    search_fields = ('propuesta__titulo', 'propuesta__estudiante__username')
    inlines = [ParticipanteDefensaInline]


@admin.register(ParticipanteDefensa)
class ParticipanteDefensaAdmin(admin.ModelAdmin):
    list_display = ('evaluacion', 'usuario', 'tipo_participante', 'rol', 'calificacion')

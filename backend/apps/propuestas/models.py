from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError

from apps.usuarios.models import validar_estudiante, validar_tutor


class Propuesta(models.Model):
    ESTADO_CHOICES = [
        ('PENDIENTE', 'Pendiente'),
        ('APROBADA', 'Aprobada'),
        ('APROBADA_CON_COMENTARIOS', 'Aprobada con comentarios'),
        ('RECHAZADA', 'Rechazada'),
    ]

    RESULTADO_CHOICES = [
        ('APROBADO', 'Aprobado'),
        ('REPROBADO', 'Reprobado'),
    ]

    estudiante = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='propuesta',
        limit_choices_to={'role': 'ESTUDIANTE'}
    )
    titulo = models.CharField(max_length=255)
    area_conocimiento = models.CharField(max_length=150)
    descripcion = models.TextField(blank=True, null=True)
    estado = models.CharField(max_length=30, choices=ESTADO_CHOICES, default='PENDIENTE', db_index=True)
    comentarios_revision = models.TextField(blank=True, null=True)
    resultado_defensa = models.CharField(
        max_length=10,
        choices=RESULTADO_CHOICES,
        null=True,
        blank=True,
        help_text='Resultado final, lo fija la defensa pública'
    )
    fecha_publicacion = models.DateTimeField(auto_now_add=True)
    ultima_modificacion = models.DateTimeField(auto_now=True)

    @property
    def aprobada(self):
        return self.estado in ('APROBADA', 'APROBADA_CON_COMENTARIOS')

    def clean(self):
        validar_estudiante(self.estudiante)

    def __str__(self):
        return f"{self.titulo} ({self.estudiante.username}) - {self.get_estado_display()}"

    class Meta:
        verbose_name = "Propuesta"
        verbose_name_plural = "Propuestas"


class TrabajoTitulacion(models.Model):
    ESTADO_ASIGNACION_CHOICES = [
        ('ACTIVO', 'Activo'),
        ('INACTIVO', 'Inactivo'),
    ]

    propuesta = models.ForeignKey(Propuesta, on_delete=models.CASCADE, related_name='trabajos_titulacion')
    tutor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='trabajos_tutorados',
        limit_choices_to={'role': 'TUTOR'}
    )
    estado_asignacion = models.CharField(max_length=10, choices=ESTADO_ASIGNACION_CHOICES, default='ACTIVO')
    observaciones = models.TextField(blank=True, null=True)
    fecha_asignacion = models.DateTimeField(auto_now_add=True)

    def clean(self):
        validar_tutor(self.tutor)
        if not self.propuesta.aprobada:
            raise ValidationError('Solo se pueden asignar tutores a propuestas aprobadas')

    def __str__(self):
        return f"{self.propuesta.titulo} - Tutor: {self.tutor.username} ({self.estado_asignacion})"

    class Meta:
        verbose_name = "Trabajo de titulación"
        verbose_name_plural = "Trabajos de titulación"
        constraints = [
            models.UniqueConstraint(
                fields=['propuesta'],
                condition=models.Q(estado_asignacion='ACTIVO'),
                name='un_tutor_activo_por_propuesta',
            ),
        ]


class VotacionTutor(models.Model):
    PRIORIDAD_CHOICES = [
        (1, 'Primera opción'),
        (2, 'Segunda opción'),
        (3, 'Tercera opción'),
    ]

    propuesta = models.ForeignKey(Propuesta, on_delete=models.CASCADE, related_name='votaciones')
    estudiante = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='votaciones_emitidas',
        limit_choices_to={'role': 'ESTUDIANTE'}
    )
    tutor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='votaciones_recibidas',
        limit_choices_to={'role': 'TUTOR'}
    )
    prioridad = models.PositiveSmallIntegerField(choices=PRIORIDAD_CHOICES)
    justificacion = models.TextField(blank=True, null=True)
    fecha_votacion = models.DateTimeField(auto_now=True)

    def clean(self):
        validar_tutor(self.tutor)

    def __str__(self):
        return f"{self.estudiante.username} -> {self.tutor.username} (prioridad {self.prioridad})"

    class Meta:
        verbose_name = "Votación de tutor"
        verbose_name_plural = "Votaciones de tutores"
        ordering = ['propuesta_id', 'prioridad']
        constraints = [
            models.UniqueConstraint(fields=['propuesta', 'prioridad'], name='una_votacion_por_prioridad'),
            models.UniqueConstraint(fields=['propuesta', 'tutor'], name='un_voto_por_tutor'),
        ]

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator


class EvaluacionDefensa(models.Model):
    TIPO_CHOICES = [
        ('PRIVADA', 'Privada'),
        ('PUBLICA', 'Pública'),
    ]

    ESTADO_CHOICES = [
        ('PENDIENTE', 'Pendiente'),
        ('PROGRAMADA', 'Programada'),
        ('REALIZADA', 'Realizada'),
        ('APROBADA', 'Aprobada'),
        ('RECHAZADA', 'Rechazada'),
        ('BLOQUEADA', 'Bloqueada'),
    ]

    ESTADOS_FINALES = ('APROBADA', 'RECHAZADA')

    propuesta = models.ForeignKey('propuestas.Propuesta', on_delete=models.CASCADE, related_name='defensas')
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES)
    fecha_defensa = models.DateField(null=True, blank=True)
    hora_defensa = models.TimeField(null=True, blank=True)
    aula = models.CharField(max_length=100, blank=True, null=True)
    estado = models.CharField(max_length=15, choices=ESTADO_CHOICES, default='PENDIENTE', db_index=True)
    calificacion = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        help_text='Promedio del tribunal'
    )
    fecha_evaluacion = models.DateTimeField(null=True, blank=True)
    comentarios = models.TextField(blank=True, null=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    @property
    def finalizada(self):
        return self.estado in self.ESTADOS_FINALES

    def __str__(self):
        return f"Defensa {self.get_tipo_display()} - {self.propuesta.titulo} ({self.get_estado_display()})"

    class Meta:
        verbose_name = "Evaluación de defensa"
        verbose_name_plural = "Evaluaciones de defensa"
        ordering = ['-fecha_creacion', '-id']
        unique_together = ('propuesta', 'tipo')


class ParticipanteDefensa(models.Model):
    evaluacion = models.ForeignKey(EvaluacionDefensa, on_delete=models.CASCADE, related_name='participantes')
    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='participaciones_defensa'
    )
    tipo_participante = models.CharField(max_length=20, help_text='Rol real del usuario al momento de asignarlo')
    rol = models.CharField(max_length=100, blank=True, default='', help_text='Etiqueta visible, p. ej. Presidente')
    calificacion = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(10)]
    )
    comentario = models.TextField(blank=True, null=True)
    fecha_calificacion = models.DateTimeField(null=True, blank=True)
    fecha_asignacion = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.usuario.username} ({self.rol or self.tipo_participante}) - {self.evaluacion}"

    class Meta:
        verbose_name = "Participante de defensa"
        verbose_name_plural = "Participantes de defensa"
        ordering = ['id']
        unique_together = ('evaluacion', 'usuario')

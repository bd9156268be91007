from django.db import models
from django.conf import settings
from django.utils import timezone


class Notificacion(models.Model):
    TIPO_CHOICES = [
        ('INFO', 'Información'),
        ('PROPUESTA', 'Propuesta'),
        ('ACTIVIDAD', 'Actividad'),
        ('EVIDENCIA', 'Evidencia'),
        ('DEFENSA', 'Defensa'),
        ('SISTEMA', 'Sistema'),
    ]

    ESTADO_CHOICES = [
        ('NO_LEIDA', 'No Leída'),
        ('LEIDA', 'Leída'),
        ('ARCHIVADA', 'Archivada'),
    ]

    usuario = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notificaciones',
        help_text='Usuario destinatario de la notificación'
    )
    titulo = models.CharField(max_length=150)
    mensaje = models.TextField()
    tipo = models.CharField(max_length=15, choices=TIPO_CHOICES, default='INFO', db_index=True)
    evento = models.CharField(
        max_length=50,
        blank=True,
        default='',
        help_text='Evento de dominio que originó la notificación (p. ej. defensa_evaluada)'
    )
    estado = models.CharField(max_length=15, choices=ESTADO_CHOICES, default='NO_LEIDA', db_index=True)
    fecha_creacion = models.DateTimeField(default=timezone.now)
    fecha_lectura = models.DateTimeField(null=True, blank=True)
    url_accion = models.CharField(max_length=255, blank=True, null=True)

    class Meta:
        verbose_name = "Notificación"
        verbose_name_plural = "Notificaciones"
        ordering = ['-fecha_creacion', '-id']

    def __str__(self):
        return f"{self.titulo} - {self.usuario.username} ({self.get_estado_display()})"

    def marcar_como_leida(self):

        self.estado = 'LEIDA'
        self.fecha_lectura = timezone.now()
        self.save(update_fields=['estado', 'fecha_lectura'])

    def archivar(self):

        self.estado = 'ARCHIVADA'
        self.save(update_fields=['estado'])

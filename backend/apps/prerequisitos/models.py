from django.db import models
from django.conf import settings


class CatalogoPrerequisito(models.Model):
    nombre = models.CharField(max_length=150)
    descripcion = models.TextField(blank=True, null=True)
    orden = models.PositiveSmallIntegerField(default=1)
    activo = models.BooleanField(default=True, db_index=True)

    def __str__(self):
        return self.nombre

    class Meta:
        verbose_name = "Prerrequisito"
        verbose_name_plural = "Catálogo de prerrequisitos"
        ordering = ['orden', 'id']


class EstudiantePrerequisito(models.Model):
    estudiante = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='prerequisitos',
        limit_choices_to={'role': 'ESTUDIANTE'}
    )
    prerequisito = models.ForeignKey(CatalogoPrerequisito, on_delete=models.CASCADE, related_name='cumplimientos')
    archivo_url = models.CharField(max_length=500, blank=True, null=True)
    cumplido = models.BooleanField(
        default=False,
        help_text='Solo el personal de titulación lo marca al validar el documento'
    )
    fecha_cumplimiento = models.DateTimeField(null=True, blank=True)
    fecha_registro = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        estado = "Cumplido" if self.cumplido else "Pendiente"
        return f"{self.estudiante.username} - {self.prerequisito.nombre}: {estado}"

    class Meta:
        verbose_name = "Cumplimiento de prerrequisito"
        verbose_name_plural = "Cumplimientos de prerrequisitos"
        unique_together = ('estudiante', 'prerequisito')

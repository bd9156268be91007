from django.db import models


class EntregableFinal(models.Model):
    TIPO_CHOICES = [
        ('TESIS', 'Tesis'),
        ('MANUAL_USUARIO', 'Manual de usuario'),
        ('ARTICULO', 'Artículo'),
    ]

    propuesta = models.ForeignKey('propuestas.Propuesta', on_delete=models.CASCADE, related_name='entregables')
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES)
    archivo_url = models.CharField(max_length=500)
    version = models.PositiveIntegerField(default=1)
    activo = models.BooleanField(default=True)
    fecha_subida = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.get_tipo_display()} v{self.version} - {self.propuesta.titulo}"

    class Meta:
        verbose_name = "Entregable final"
        verbose_name_plural = "Entregables finales"
        ordering = ['tipo', '-version']
        constraints = [
            models.UniqueConstraint(
                fields=['propuesta', 'tipo'],
                condition=models.Q(activo=True),
                name='un_entregable_activo_por_tipo',
            ),
            models.UniqueConstraint(
                fields=['propuesta', 'tipo', 'version'],
                name='version_unica_por_tipo',
            ),
        ]

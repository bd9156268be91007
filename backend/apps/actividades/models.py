from decimal import Decimal

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from .calificacion import calcular_nota_final, pista

ESTADO_REVISION_CHOICES = [
    ('PENDIENTE', 'Pendiente'),
    ('APROBADO', 'Aprobado'),
    ('RECHAZADO', 'Rechazado'),
]

ESTADO_ENTREGA_CHOICES = [
    ('NO_ENTREGADO', 'No entregado'),
    ('ENTREGADO', 'Entregado'),
]


def _nota():
    return models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(10)],
    )


class Actividad(models.Model):
    TIPO_CHOICES = [
        ('TUTORIA', 'Tutoría'),
        ('DOCENCIA', 'Docencia'),
    ]

    propuesta = models.ForeignKey('propuestas.Propuesta', on_delete=models.CASCADE, related_name='actividades')
    nombre = models.CharField(max_length=200)
    descripcion = models.TextField(blank=True, null=True)
    tipo = models.CharField(max_length=10, choices=TIPO_CHOICES, default='TUTORIA')
    semana = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(16)]
    )
    fecha_activacion = models.DateTimeField(null=True, blank=True)
    fecha_entrega = models.DateTimeField(null=True, blank=True, help_text='Fecha límite de entrega')
    requisitos = models.JSONField(default=list, blank=True)
    estado = models.CharField(max_length=15, choices=ESTADO_ENTREGA_CHOICES, default='NO_ENTREGADO')
    creado_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='actividades_creadas'
    )
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.nombre} ({self.get_tipo_display()}) - {self.propuesta.titulo}"

    class Meta:
        verbose_name = "Actividad"
        verbose_name_plural = "Actividades"
        ordering = ['id']


class Evidencia(models.Model):
    actividad = models.ForeignKey(Actividad, on_delete=models.CASCADE, related_name='evidencias')
    semana = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(16)])
    contenido = models.TextField(blank=True, default='')
    archivo_url = models.CharField(max_length=500, blank=True, null=True)
    estado = models.CharField(max_length=15, choices=ESTADO_ENTREGA_CHOICES, default='ENTREGADO')
    fecha_entrega = models.DateTimeField(null=True, blank=True)

    calificacion_tutor = _nota()
    feedback_tutor = models.TextField(blank=True, null=True)
    estado_revision_tutor = models.CharField(max_length=10, choices=ESTADO_REVISION_CHOICES, default='PENDIENTE')
    fecha_revision_tutor = models.DateTimeField(null=True, blank=True)

    calificacion_docente = _nota()
    feedback_docente = models.TextField(blank=True, null=True)
    estado_revision_docente = models.CharField(max_length=10, choices=ESTADO_REVISION_CHOICES, default='PENDIENTE')
    fecha_revision_docente = models.DateTimeField(null=True, blank=True)

    ponderacion_tutor = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0.50'))
    ponderacion_docente = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0.50'))
    calificacion_final = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        help_text='Solo existe cuando tutor y docente han calificado'
    )
    es_automatica = models.BooleanField(default=False, help_text='Registro en cero por vencimiento del plazo')
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    def recalcular_nota_final(self):
        self.calificacion_final = calcular_nota_final(
            pista(self.calificacion_tutor),
            pista(self.calificacion_docente),
            self.ponderacion_tutor,
            self.ponderacion_docente,
        )
        return self.calificacion_final

    def __str__(self):
        return f"Semana {self.semana} - {self.actividad.nombre} ({self.get_estado_display()})"

    class Meta:
        verbose_name = "Evidencia"
        verbose_name_plural = "Evidencias"
        ordering = ['semana', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['actividad'],
                condition=models.Q(es_automatica=True),
                name='una_evidencia_automatica_por_actividad',
            ),
        ]


class Comentario(models.Model):
    evidencia = models.ForeignKey(Evidencia, on_delete=models.CASCADE, related_name='comentarios')
    autor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='comentarios_evidencia')
    texto = models.TextField()
    fecha = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.autor.username} en evidencia {self.evidencia_id}"

    class Meta:
        verbose_name = "Comentario"
        verbose_name_plural = "Comentarios"
        ordering = ['fecha', 'id']

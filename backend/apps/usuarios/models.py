from django.contrib.auth.models import AbstractUser
from django.db import models
from django.core.exceptions import ValidationError

ROLES_PERSONAL = ('DIRECTOR', 'COORDINADOR')
ROLES_TRIBUNAL = ('TUTOR', 'COMITE', 'DIRECTOR', 'COORDINADOR')
ROLES_CALIFICADORES = ('TUTOR', 'DOCENTE_INTEGRACION')


def validar_estudiante(user):

    if user.role != 'ESTUDIANTE':
        raise ValidationError('Solo usuarios con rol ESTUDIANTE pueden tener una propuesta de titulación')


def validar_tutor(user):

    if user.role != 'TUTOR':
        raise ValidationError('El usuario debe tener el rol de TUTOR')


class User(AbstractUser):
    ROLE_CHOICES = [
        ('ESTUDIANTE', 'Estudiante'),
        ('TUTOR', 'Tutor'),
        ('DOCENTE_INTEGRACION', 'Docente de Integración'),
        ('COMITE', 'Comité'),
        ('DIRECTOR', 'Director'),
        ('COORDINADOR', 'Coordinador'),
    ]
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default='ESTUDIANTE'
    )
    cedula = models.CharField(max_length=20, unique=True, null=True, blank=True)

    @property
    def nombre_completo(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username

    @property
    def es_personal(self):
        return self.role in ROLES_PERSONAL

    @property
    def puede_ser_tribunal(self):
        return self.role in ROLES_TRIBUNAL

    def __str__(self):
        return f"{self.username} ({self.role})"

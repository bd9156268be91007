"""
Fixtures compartidos de los tests del motor de titulación.

Los tests corren con pytest-django (`--nomigrations`). Las notificaciones se
entregan en `transaction.on_commit`, así que los tests que las verifican usan
`django_capture_on_commit_callbacks(execute=True)`.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.actividades.models import Actividad, Evidencia
from apps.entregables.models import EntregableFinal
from apps.prerequisitos.models import CatalogoPrerequisito, EstudiantePrerequisito
from apps.propuestas.models import Propuesta, TrabajoTitulacion
from apps.usuarios.models import User


@pytest.fixture
def crear_usuario(db):
    contador = {'n': 0}

    def _crear(role, username=None, **extra):
        contador['n'] += 1
        username = username or f"{role.lower()}{contador['n']}"
        return User.objects.create_user(
            username=username,
            password='clave-segura-123',
            email=f"{username}@titulacion.test",
            first_name=extra.pop('first_name', username.capitalize()),
            last_name=extra.pop('last_name', 'Prueba'),
            role=role,
            **extra
        )

    return _crear


@pytest.fixture
def estudiante(crear_usuario):
    return crear_usuario('ESTUDIANTE', 'estudiante')


@pytest.fixture
def otro_estudiante(crear_usuario):
    return crear_usuario('ESTUDIANTE', 'otro_estudiante')


@pytest.fixture
def tutor(crear_usuario):
    return crear_usuario('TUTOR', 'tutor')


@pytest.fixture
def docente(crear_usuario):
    return crear_usuario('DOCENTE_INTEGRACION', 'docente')


@pytest.fixture
def director(crear_usuario):
    return crear_usuario('DIRECTOR', 'director')


@pytest.fixture
def coordinador(crear_usuario):
    return crear_usuario('COORDINADOR', 'coordinador')


@pytest.fixture
def comite(crear_usuario):
    return crear_usuario('COMITE', 'comite')


@pytest.fixture
def catalogo(db):
    return [
        CatalogoPrerequisito.objects.create(nombre=nombre, orden=orden)
        for orden, nombre in enumerate(['Inglés B1', 'Prácticas', 'Vinculación'], start=1)
    ]


@pytest.fixture
def cumplir_prerequisitos():
    def _cumplir(estudiante, prerequisitos):
        for prerequisito in prerequisitos:
            EstudiantePrerequisito.objects.create(
                estudiante=estudiante,
                prerequisito=prerequisito,
                archivo_url=f"https://archivos.test/{prerequisito.id}.pdf",
                cumplido=True,
                fecha_cumplimiento=timezone.now(),
            )

    return _cumplir


@pytest.fixture
def propuesta(estudiante):
    return Propuesta.objects.create(
        estudiante=estudiante,
        titulo='Sistema de alertas tempranas',
        area_conocimiento='Ingeniería de software',
        estado='APROBADA',
    )


@pytest.fixture
def propuesta_con_tutor(propuesta, tutor):
    TrabajoTitulacion.objects.create(propuesta=propuesta, tutor=tutor)
    return propuesta


@pytest.fixture
def actividad(propuesta_con_tutor, tutor):
    return Actividad.objects.create(
        propuesta=propuesta_con_tutor,
        nombre='Avance capítulo 1',
        semana=1,
        creado_por=tutor,
    )


@pytest.fixture
def actividad_vencida(propuesta_con_tutor):
    return Actividad.objects.create(
        propuesta=propuesta_con_tutor,
        nombre='Entrega vencida',
        fecha_entrega=timezone.now() - timedelta(days=2),
    )


@pytest.fixture
def aprobar_evidencias():
    """Crea `cantidad` evidencias con la revisión del tutor aprobada."""
    def _aprobar(propuesta, cantidad):
        actividad = Actividad.objects.create(propuesta=propuesta, nombre='Avances aprobados')
        for i in range(cantidad):
            Evidencia.objects.create(
                actividad=actividad,
                semana=(i % 16) + 1,
                contenido=f'Avance {i + 1}',
                calificacion_tutor=Decimal('9.00'),
                estado_revision_tutor='APROBADO',
            )
        return actividad

    return _aprobar


@pytest.fixture
def subir_documentos():
    def _subir(propuesta, tipos=('TESIS', 'MANUAL_USUARIO', 'ARTICULO')):
        return [
            EntregableFinal.objects.create(propuesta=propuesta, tipo=tipo, archivo_url=f'https://archivos.test/{tipo}.pdf')
            for tipo in tipos
        ]

    return _subir


@pytest.fixture
def propuesta_elegible(propuesta_con_tutor, aprobar_evidencias, subir_documentos):
    aprobar_evidencias(propuesta_con_tutor, 16)
    subir_documentos(propuesta_con_tutor)
    return propuesta_con_tutor


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def cliente_de(api_client):
    def _cliente(usuario):
        api_client.force_authenticate(user=usuario)
        return api_client

    return _cliente

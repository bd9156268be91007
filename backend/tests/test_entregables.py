import pytest

from apps.entregables.models import EntregableFinal
from apps.entregables.servicios import listar_entregables, subir_entregable
from titulacion.excepciones import ErrorAutorizacion, ErrorNoEncontrado, ErrorPrecondicion, ErrorValidacion


pytestmark = pytest.mark.django_db


@pytest.fixture
def propuesta_desbloqueada(propuesta_con_tutor, aprobar_evidencias):
    aprobar_evidencias(propuesta_con_tutor, 16)
    return propuesta_con_tutor


def test_primera_version(estudiante, propuesta_desbloqueada):
    entregable = subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis-v1.pdf')

    assert entregable.version == 1
    assert entregable.activo


def test_nueva_version_desactiva_la_anterior(estudiante, propuesta_desbloqueada):
    v1 = subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis-v1.pdf')
    v2 = subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis-v2.pdf')

    v1.refresh_from_db()
    assert not v1.activo
    assert v2.version == 2
    assert v2.activo

    activos = list(listar_entregables(estudiante))
    assert activos == [v2]

    historial = list(listar_entregables(estudiante, historial=True))
    assert [e.version for e in historial] == [2, 1]


def test_versiones_independientes_por_tipo(estudiante, propuesta_desbloqueada):
    subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis.pdf')
    articulo = subir_entregable(estudiante, 'ARTICULO', 'https://archivos.test/articulo.pdf')

    assert articulo.version == 1
    assert EntregableFinal.objects.filter(activo=True).count() == 2


def test_bloqueado_sin_evidencias_suficientes(estudiante, propuesta_con_tutor, aprobar_evidencias):
    aprobar_evidencias(propuesta_con_tutor, 15)

    with pytest.raises(ErrorPrecondicion):
        subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis.pdf')

    assert not EntregableFinal.objects.exists()


def test_umbral_configurable(settings, estudiante, propuesta_con_tutor, aprobar_evidencias):
    settings.TITULACION = {'UMBRAL_EVIDENCIAS_ENTREGABLES': 3}
    aprobar_evidencias(propuesta_con_tutor, 3)

    assert subir_entregable(estudiante, 'MANUAL_USUARIO', 'https://archivos.test/manual.pdf').version == 1


def test_tipo_invalido(estudiante, propuesta_desbloqueada):
    with pytest.raises(ErrorValidacion):
        subir_entregable(estudiante, 'POSTER', 'https://archivos.test/poster.pdf')


def test_solo_estudiantes(tutor, propuesta_desbloqueada):
    with pytest.raises(ErrorAutorizacion):
        subir_entregable(tutor, 'TESIS', 'https://archivos.test/tesis.pdf')


def test_estudiante_sin_propuesta(otro_estudiante):
    with pytest.raises(ErrorNoEncontrado):
        subir_entregable(otro_estudiante, 'TESIS', 'https://archivos.test/tesis.pdf')


def test_listado_de_otra_propuesta(otro_estudiante, estudiante, propuesta_desbloqueada):
    subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis.pdf')

    with pytest.raises(ErrorAutorizacion):
        listar_entregables(otro_estudiante, propuesta_desbloqueada.id)


def test_tutor_lista_entregables(tutor, estudiante, propuesta_desbloqueada):
    subir_entregable(estudiante, 'TESIS', 'https://archivos.test/tesis.pdf')

    assert len(listar_entregables(tutor, propuesta_desbloqueada.id)) == 1

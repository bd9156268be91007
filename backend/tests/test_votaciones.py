import pytest
from rest_framework import status

from apps.propuestas import votaciones
from apps.propuestas.models import Propuesta, TrabajoTitulacion, VotacionTutor
from titulacion.excepciones import (
    ErrorAutorizacion,
    ErrorConflicto,
    ErrorNoEncontrado,
    ErrorPrecondicion,
    ErrorValidacion,
)


pytestmark = pytest.mark.django_db


@pytest.fixture
def tutores(crear_usuario):
    return [crear_usuario('TUTOR', f'tutor_{n}') for n in range(1, 4)]


@pytest.fixture
def otra_propuesta(otro_estudiante):
    return Propuesta.objects.create(
        estudiante=otro_estudiante,
        titulo='Plataforma de tutorías',
        area_conocimiento='Sistemas de información',
        estado='APROBADA',
    )


class TestVotarTutor:

    def test_voto_por_prioridad(self, estudiante, propuesta, tutores):
        votacion, creada = votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1, 'Experto en el área')

        assert creada
        assert votacion.tutor == tutores[0]
        assert votacion.prioridad == 1
        assert votacion.justificacion == 'Experto en el área'

    def test_revotar_reemplaza_la_prioridad(self, estudiante, propuesta, tutores):
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)

        votacion, creada = votaciones.votar_tutor(estudiante, propuesta.id, tutores[1].id, 1)

        assert not creada
        assert VotacionTutor.objects.get(propuesta=propuesta, prioridad=1).tutor == tutores[1]
        assert VotacionTutor.objects.count() == 1

    def test_mismo_tutor_en_dos_prioridades(self, estudiante, propuesta, tutores):
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)

        with pytest.raises(ErrorConflicto) as error:
            votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 2)

        assert error.value.extra == {'prioridadExistente': 1}

    @pytest.mark.parametrize('prioridad', [0, 4, 'primera', None])
    def test_prioridad_invalida(self, estudiante, propuesta, tutores, prioridad):
        with pytest.raises(ErrorValidacion):
            votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, prioridad)

    def test_usuario_sin_rol_tutor(self, estudiante, propuesta, comite):
        with pytest.raises(ErrorValidacion):
            votaciones.votar_tutor(estudiante, propuesta.id, comite.id, 1)

    def test_propuesta_ajena(self, estudiante, otra_propuesta, tutores):
        with pytest.raises(ErrorAutorizacion):
            votaciones.votar_tutor(estudiante, otra_propuesta.id, tutores[0].id, 1)

    def test_propuesta_inexistente(self, estudiante, tutores):
        with pytest.raises(ErrorNoEncontrado):
            votaciones.votar_tutor(estudiante, 9999, tutores[0].id, 1)

    def test_solo_estudiantes(self, director, propuesta, tutores):
        with pytest.raises(ErrorAutorizacion):
            votaciones.votar_tutor(director, propuesta.id, tutores[0].id, 1)


class TestConsultarVotaciones:

    @pytest.fixture
    def votos(self, estudiante, otro_estudiante, propuesta, otra_propuesta, tutores):
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[1].id, 2)
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)
        votaciones.votar_tutor(otro_estudiante, otra_propuesta.id, tutores[0].id, 1)
        votaciones.votar_tutor(otro_estudiante, otra_propuesta.id, tutores[2].id, 3)

    def test_propias_del_estudiante(self, votos, estudiante, tutores):
        resultado = votaciones.votaciones_estudiante(estudiante, estudiante.id)

        assert [(v.prioridad, v.tutor) for v in resultado] == [(1, tutores[0]), (2, tutores[1])]

    def test_estudiante_no_ve_ajenas(self, votos, estudiante, otro_estudiante, otra_propuesta):
        with pytest.raises(ErrorAutorizacion):
            votaciones.votaciones_estudiante(estudiante, otro_estudiante.id)
        with pytest.raises(ErrorAutorizacion):
            votaciones.votaciones_propuesta(estudiante, otra_propuesta.id)

    def test_por_propuesta_para_el_personal(self, votos, coordinador, otra_propuesta):
        resultado = votaciones.votaciones_propuesta(coordinador, otra_propuesta.id)

        assert [v.prioridad for v in resultado] == [1, 3]

    def test_tutor_ve_sus_votos(self, votos, tutores):
        resultado = votaciones.votaciones_tutor(tutores[0], tutores[0].id)

        assert len(resultado) == 2
        with pytest.raises(ErrorAutorizacion):
            votaciones.votaciones_tutor(tutores[0], tutores[1].id)

    def test_todas_solo_personal(self, votos, director, estudiante):
        assert votaciones.todas_las_votaciones(director).count() == 4
        with pytest.raises(ErrorAutorizacion):
            votaciones.todas_las_votaciones(estudiante)

    def test_resumen_ordenado_por_total(self, votos, director, tutores):
        resumen = votaciones.resumen_votaciones(director)

        assert [fila['tutor'] for fila in resumen] == [tutores[0], tutores[1], tutores[2]]
        assert resumen[0]['votaciones'] == {'prioridad1': 2, 'prioridad2': 0, 'prioridad3': 0, 'total': 2}
        assert resumen[2]['votaciones'] == {'prioridad1': 0, 'prioridad2': 0, 'prioridad3': 1, 'total': 1}

    def test_resumen_solo_personal(self, tutor):
        with pytest.raises(ErrorAutorizacion):
            votaciones.resumen_votaciones(tutor)


class TestEliminarVotacion:

    def test_elimina_su_voto(self, estudiante, propuesta, tutores):
        votacion, _ = votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)

        votaciones.eliminar_votacion(estudiante, votacion.id)

        assert not VotacionTutor.objects.exists()

    def test_voto_ajeno(self, estudiante, otro_estudiante, otra_propuesta, tutores):
        votacion, _ = votaciones.votar_tutor(otro_estudiante, otra_propuesta.id, tutores[0].id, 1)

        with pytest.raises(ErrorAutorizacion):
            votaciones.eliminar_votacion(estudiante, votacion.id)

    def test_tutor_ya_asignado(self, estudiante, propuesta, tutores):
        votacion, _ = votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)
        TrabajoTitulacion.objects.create(propuesta=propuesta, tutor=tutores[0])

        with pytest.raises(ErrorPrecondicion):
            votaciones.eliminar_votacion(estudiante, votacion.id)

        assert VotacionTutor.objects.filter(id=votacion.id).exists()

    def test_inexistente(self, estudiante):
        with pytest.raises(ErrorNoEncontrado):
            votaciones.eliminar_votacion(estudiante, 9999)


class TestVotacionesApi:

    def test_votar_y_revotar(self, cliente_de, estudiante, propuesta, tutores):
        cliente = cliente_de(estudiante)
        datos = {'propuesta': propuesta.id, 'tutor': tutores[0].id, 'prioridad': 1}

        response = cliente.post('/api/propuestas/votaciones/', datos, format='json')
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['tutor_detail']['id'] == tutores[0].id

        datos['tutor'] = tutores[1].id
        response = cliente.post('/api/propuestas/votaciones/', datos, format='json')
        assert response.status_code == status.HTTP_200_OK

    def test_personal_no_vota(self, cliente_de, director, propuesta, tutores):
        response = cliente_de(director).post(
            '/api/propuestas/votaciones/',
            {'propuesta': propuesta.id, 'tutor': tutores[0].id, 'prioridad': 1},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_resumen(self, cliente_de, estudiante, director, propuesta, tutores):
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[2].id, 1)

        response = cliente_de(director).get('/api/propuestas/votaciones/resumen/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['tutor']['id'] == tutores[2].id
        assert response.data[0]['votaciones']['total'] == 1

    def test_por_estudiante(self, cliente_de, estudiante, propuesta, tutores):
        votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)

        response = cliente_de(estudiante).get(f'/api/propuestas/votaciones/estudiante/{estudiante.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert [v['prioridad'] for v in response.data] == [1]

    def test_eliminar(self, cliente_de, estudiante, propuesta, tutores):
        votacion, _ = votaciones.votar_tutor(estudiante, propuesta.id, tutores[0].id, 1)

        response = cliente_de(estudiante).delete(f'/api/propuestas/votaciones/{votacion.id}/')

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not VotacionTutor.objects.exists()

    def test_detalle_de_propuesta_sigue_disponible(self, cliente_de, director, propuesta):
        response = cliente_de(director).get(f'/api/propuestas/{propuesta.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['id'] == propuesta.id

import pytest
from rest_framework import status

from apps.actividades.models import Evidencia
from apps.defensas.models import EvaluacionDefensa
from notificaciones.servicios import notificar


pytestmark = pytest.mark.django_db


def test_sin_autenticacion(api_client):
    response = api_client.get('/api/propuestas/')

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_devuelve_token_y_perfil(api_client, estudiante):
    response = api_client.post(
        '/api/usuarios/login/',
        {'username': 'estudiante', 'password': 'clave-segura-123'},
        format='json'
    )

    assert response.status_code == status.HTTP_200_OK
    assert 'access' in response.data
    assert response.data['user']['role'] == 'ESTUDIANTE'


class TestProgresionApi:

    def test_puede_crear_propuesta(self, cliente_de, estudiante, catalogo, cumplir_prerequisitos):
        cumplir_prerequisitos(estudiante, catalogo[:2])

        response = cliente_de(estudiante).get('/api/progresion/puede-crear-propuesta/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            'canCreate': False,
            'cumplidos': 2,
            'totalRequisitos': 3,
            'message': 'Te faltan 1 prerrequisito(s) por cumplir',
        }

    def test_crear_propuesta_sin_prerequisitos(self, cliente_de, estudiante, catalogo):
        response = cliente_de(estudiante).post(
            '/api/propuestas/',
            {'titulo': 'Chatbot', 'area_conocimiento': 'IA'},
            format='json'
        )

        assert response.status_code == status.HTTP_412_PRECONDITION_FAILED
        assert response.data['error_code'] == 'PRECONDICION'
        assert response.data['totalRequisitos'] == 3

    def test_crear_propuesta_dos_veces(self, cliente_de, estudiante, catalogo, cumplir_prerequisitos):
        cumplir_prerequisitos(estudiante, catalogo)
        cliente = cliente_de(estudiante)
        datos = {'titulo': 'Chatbot', 'area_conocimiento': 'IA'}

        assert cliente.post('/api/propuestas/', datos, format='json').status_code == status.HTTP_201_CREATED
        response = cliente.post('/api/propuestas/', datos, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['error_code'] == 'CONFLICTO'

    def test_desbloqueo_y_etapas(self, cliente_de, estudiante, propuesta_con_tutor, aprobar_evidencias):
        aprobar_evidencias(propuesta_con_tutor, 16)
        cliente = cliente_de(estudiante)

        desbloqueo = cliente.get('/api/progresion/desbloqueo/').data
        etapas = cliente.get('/api/progresion/etapas/').data

        assert desbloqueo['evidencias_aprobadas'] == 16
        assert desbloqueo['puede_subir_documentos'] is True
        assert desbloqueo['puede_defender'] is False
        assert len(etapas['etapas']) == 7

    def test_estudiante_no_consulta_a_otro(self, cliente_de, estudiante, otro_estudiante):
        response = cliente_de(estudiante).get(f'/api/progresion/etapas/?estudiante={otro_estudiante.id}')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error_code'] == 'AUTORIZACION'


class TestEvidenciasApi:

    def test_semana_invalida(self, cliente_de, estudiante, actividad):
        response = cliente_de(estudiante).post(
            f'/api/actividades/actividades/{actividad.id}/entregar/',
            {'semana': 17, 'contenido': 'Avance'},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'VALIDACION'
        assert not Evidencia.objects.exists()

    def test_entrega_y_calificacion(self, cliente_de, estudiante, tutor, docente, actividad):
        response = cliente_de(estudiante).post(
            f'/api/actividades/actividades/{actividad.id}/entregar/',
            {'semana': 1, 'contenido': 'Avance'},
            format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED
        evidencia_id = response.data['id']

        cliente_de(tutor).post(
            f'/api/actividades/evidencias/{evidencia_id}/calificar-tutor/',
            {'calificacion': 8, 'feedback': 'Bien'},
            format='json'
        )
        response = cliente_de(docente).post(
            f'/api/actividades/evidencias/{evidencia_id}/calificar-docente/',
            {'calificacion': 6},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['calificacion_final'] == '7.00'

    def test_docente_no_califica_pista_tutor(self, cliente_de, estudiante, docente, actividad):
        evidencia = Evidencia.objects.create(actividad=actividad, semana=1)

        response = cliente_de(docente).post(
            f'/api/actividades/evidencias/{evidencia.id}/calificar-tutor/',
            {'calificacion': 8},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_listado_registra_ceros(self, cliente_de, tutor, propuesta_con_tutor, actividad_vencida):
        cliente = cliente_de(tutor)

        for _ in range(2):
            response = cliente.get(f'/api/actividades/actividades/?propuesta={propuesta_con_tutor.id}')
            assert response.status_code == status.HTTP_200_OK

        assert response.data[0]['total_evidencias'] == 1
        assert Evidencia.objects.filter(actividad=actividad_vencida, es_automatica=True).count() == 1

    def test_resumen_propio(self, cliente_de, estudiante, propuesta_con_tutor):
        response = cliente_de(estudiante).get('/api/actividades/resumen/')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['semanas']) == 16
        assert response.data['promedio'] == '0.00'


class TestEntregablesApi:

    def test_versiones(self, cliente_de, estudiante, propuesta_con_tutor, aprobar_evidencias):
        aprobar_evidencias(propuesta_con_tutor, 16)
        cliente = cliente_de(estudiante)

        for version in (1, 2):
            response = cliente.post(
                '/api/entregables/',
                {'tipo': 'TESIS', 'archivo_url': f'https://archivos.test/tesis-v{version}.pdf'},
                format='json'
            )
            assert response.status_code == status.HTTP_201_CREATED

        activos = cliente.get('/api/entregables/').data
        historial = cliente.get('/api/entregables/?history=true').data

        assert [(e['version'], e['activo']) for e in activos] == [(2, True)]
        assert [(e['version'], e['activo']) for e in historial] == [(2, True), (1, False)]

    def test_carga_bloqueada(self, cliente_de, estudiante, propuesta_con_tutor):
        response = cliente_de(estudiante).post(
            '/api/entregables/',
            {'tipo': 'TESIS', 'archivo_url': 'https://archivos.test/tesis.pdf'},
            format='json'
        )

        assert response.status_code == status.HTTP_412_PRECONDITION_FAILED
        assert response.data['requeridas'] == 16


class TestDefensasApi:

    def test_flujo_defensa_privada(self, cliente_de, director, comite, propuesta_elegible):
        cliente = cliente_de(director)
        response = cliente.post(
            '/api/defensas/privada/',
            {'propuesta': propuesta_elegible.id, 'fecha_defensa': '2026-11-20', 'hora_defensa': '10:00', 'aula': 'A-1'},
            format='json'
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['estado'] == 'PROGRAMADA'
        evaluacion_id = response.data['id']

        url_participantes = f'/api/defensas/{evaluacion_id}/participantes/'
        datos = {'usuario': comite.id, 'tipo_participante': 'TUTOR', 'rol': 'Vocal'}
        assert cliente.post(url_participantes, datos, format='json').status_code == status.HTTP_201_CREATED
        response = cliente.post(url_participantes, dict(datos, rol='Presidente'), format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['tipo_participante'] == 'COMITE'
        assert response.data['rol'] == 'Presidente'

        response = cliente_de(comite).post(
            f'/api/defensas/{evaluacion_id}/calificar/',
            {'calificacion': '8.5', 'comentario': 'Sólida'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['evaluacion']['estado'] == 'APROBADA'
        assert response.data['evaluacion']['calificacion'] == '8.50'

    def test_publica_sin_privada_aprobada(self, cliente_de, director, propuesta_elegible):
        EvaluacionDefensa.objects.create(propuesta=propuesta_elegible, tipo='PRIVADA', estado='PROGRAMADA')

        response = cliente_de(director).post(
            '/api/defensas/publica/',
            {'propuesta': propuesta_elegible.id},
            format='json'
        )

        assert response.status_code == status.HTTP_412_PRECONDITION_FAILED
        assert response.data['estadoPrivada'] == 'PROGRAMADA'

    def test_reprogramar(self, cliente_de, director, propuesta_elegible):
        evaluacion = EvaluacionDefensa.objects.create(propuesta=propuesta_elegible, tipo='PRIVADA')

        response = cliente_de(director).patch(
            f'/api/defensas/{evaluacion.id}/',
            {'fecha_defensa': '2026-12-01'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['estado'] == 'PROGRAMADA'

    def test_detalle_ajeno(self, cliente_de, otro_estudiante, propuesta_elegible):
        evaluacion = EvaluacionDefensa.objects.create(propuesta=propuesta_elegible, tipo='PRIVADA')

        response = cliente_de(otro_estudiante).get(f'/api/defensas/{evaluacion.id}/')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_defensas_del_jurado(self, cliente_de, director, comite, propuesta_elegible):
        evaluacion = EvaluacionDefensa.objects.create(propuesta=propuesta_elegible, tipo='PRIVADA')
        evaluacion.participantes.create(usuario=comite, tipo_participante='COMITE')

        response = cliente_de(comite).get('/api/defensas/jurado/')

        assert [d['id'] for d in response.data] == [evaluacion.id]


class TestNotificacionesApi:

    def test_bandeja_y_lectura(self, cliente_de, estudiante):
        notificacion = notificar(estudiante, 'Aviso', 'Mensaje de prueba')
        cliente = cliente_de(estudiante)

        bandeja = cliente.get('/api/notificaciones/bandeja/')
        assert [n['id'] for n in bandeja.data] == [notificacion.id]
        assert cliente.get('/api/notificaciones/bandeja/no_leidas/').data == {'count': 1}

        response = cliente.post(f'/api/notificaciones/bandeja/{notificacion.id}/marcar_como_leida/')

        assert response.data['estado'] == 'LEIDA'
        assert cliente.get('/api/notificaciones/bandeja/no_leidas/').data == {'count': 0}

    def test_notificacion_ajena(self, cliente_de, estudiante, otro_estudiante):
        notificacion = notificar(estudiante, 'Aviso', 'Privado')

        response = cliente_de(otro_estudiante).post(f'/api/notificaciones/bandeja/{notificacion.id}/archivar/')

        assert response.status_code == status.HTTP_404_NOT_FOUND

from decimal import Decimal

import pytest

from apps.actividades import servicios
from apps.actividades.models import Actividad, Evidencia, Comentario
from titulacion.excepciones import ErrorAutorizacion, ErrorNoEncontrado, ErrorValidacion


pytestmark = pytest.mark.django_db


class TestCrearActividad:

    def test_tutor_asignado_crea_actividad(self, tutor, propuesta_con_tutor):
        actividad = servicios.crear_actividad(tutor, propuesta_con_tutor.id, 'Marco teórico', semana=3)

        assert actividad.estado == 'NO_ENTREGADO'
        assert actividad.semana == 3
        assert actividad.creado_por == tutor

    def test_tutor_ajeno_no_puede_crear(self, crear_usuario, propuesta_con_tutor):
        otro_tutor = crear_usuario('TUTOR')

        with pytest.raises(ErrorAutorizacion):
            servicios.crear_actividad(otro_tutor, propuesta_con_tutor.id, 'Marco teórico')

    def test_estudiante_no_puede_crear(self, estudiante, propuesta_con_tutor):
        with pytest.raises(ErrorAutorizacion):
            servicios.crear_actividad(estudiante, propuesta_con_tutor.id, 'Marco teórico')

    def test_limite_de_actividades(self, docente, propuesta_con_tutor):
        Actividad.objects.bulk_create([
            Actividad(propuesta=propuesta_con_tutor, nombre=f'Actividad {i}') for i in range(64)
        ])

        with pytest.raises(ErrorValidacion):
            servicios.crear_actividad(docente, propuesta_con_tutor.id, 'Una más')

        assert propuesta_con_tutor.actividades.count() == 64

    def test_propuesta_inexistente(self, director):
        with pytest.raises(ErrorNoEncontrado):
            servicios.crear_actividad(director, 9999, 'Sin propuesta')


class TestEntregarEvidencia:

    def test_entrega_valida(self, estudiante, actividad):
        evidencia = servicios.entregar_evidencia(estudiante, actividad.id, 1, 'Primer avance', 'https://x.test/a.pdf')

        actividad.refresh_from_db()
        assert evidencia.estado == 'ENTREGADO'
        assert evidencia.fecha_entrega is not None
        assert evidencia.ponderacion_tutor == Decimal('0.50')
        assert evidencia.calificacion_final is None
        assert actividad.estado == 'ENTREGADO'
        assert Comentario.objects.filter(evidencia=evidencia, autor=estudiante, texto='Primer avance').exists()

    @pytest.mark.parametrize('semana', [0, 17, -1, 'abc'])
    def test_semana_fuera_de_rango(self, estudiante, actividad, semana):
        with pytest.raises(ErrorValidacion):
            servicios.entregar_evidencia(estudiante, actividad.id, semana, 'Avance')

        assert not Evidencia.objects.exists()

    def test_solo_el_dueno_entrega(self, otro_estudiante, actividad):
        with pytest.raises(ErrorAutorizacion):
            servicios.entregar_evidencia(otro_estudiante, actividad.id, 1, 'Avance ajeno')

        assert not Evidencia.objects.exists()

    def test_actividad_inexistente(self, estudiante):
        with pytest.raises(ErrorNoEncontrado):
            servicios.entregar_evidencia(estudiante, 9999, 1, 'Avance')


class TestCalificarEvidencia:

    @pytest.fixture
    def evidencia(self, estudiante, actividad):
        return servicios.entregar_evidencia(estudiante, actividad.id, 1, 'Avance')

    def test_nota_final_solo_con_ambas_pistas(self, tutor, docente, evidencia):
        evidencia = servicios.calificar_tutor(tutor, evidencia.id, 8, 'Bien encaminado')
        assert evidencia.estado_revision_tutor == 'APROBADO'
        assert evidencia.calificacion_final is None

        evidencia = servicios.calificar_docente(docente, evidencia.id, 6)
        evidencia.refresh_from_db()
        assert evidencia.estado_revision_docente == 'APROBADO'
        assert evidencia.calificacion_final == Decimal('7.00')

    def test_nota_cero_cuenta_como_calificada(self, tutor, docente, evidencia):
        servicios.calificar_tutor(tutor, evidencia.id, 0)
        evidencia = servicios.calificar_docente(docente, evidencia.id, 10)

        assert evidencia.calificacion_tutor == Decimal('0')
        assert evidencia.calificacion_final == Decimal('5.00')

    def test_quitar_nota_deja_la_final_indefinida(self, tutor, docente, evidencia):
        servicios.calificar_tutor(tutor, evidencia.id, 8)
        servicios.calificar_docente(docente, evidencia.id, 8)

        evidencia = servicios.calificar_docente(docente, evidencia.id, None)

        assert evidencia.estado_revision_docente == 'PENDIENTE'
        assert evidencia.calificacion_final is None

    def test_ponderaciones_de_la_evidencia(self, settings, estudiante, actividad, tutor, docente):
        settings.TITULACION = {'PONDERACION_TUTOR': '0.30', 'PONDERACION_DOCENTE': '0.70'}
        evidencia = servicios.entregar_evidencia(estudiante, actividad.id, 2, 'Avance')

        servicios.calificar_tutor(tutor, evidencia.id, 9)
        evidencia = servicios.calificar_docente(docente, evidencia.id, 7)

        assert evidencia.calificacion_final == Decimal('7.60')

    @pytest.mark.parametrize('rol', ['ESTUDIANTE', 'COMITE', 'DIRECTOR', 'DOCENTE_INTEGRACION'])
    def test_rol_incorrecto_para_pista_tutor(self, crear_usuario, evidencia, rol):
        with pytest.raises(ErrorAutorizacion):
            servicios.calificar_tutor(crear_usuario(rol), evidencia.id, 8)

    def test_tutor_no_califica_pista_docente(self, tutor, evidencia):
        with pytest.raises(ErrorAutorizacion):
            servicios.calificar_docente(tutor, evidencia.id, 8)

    @pytest.mark.parametrize('nota', [-1, 10.5, 'diez'])
    def test_nota_invalida(self, tutor, evidencia, nota):
        with pytest.raises(ErrorValidacion):
            servicios.calificar_tutor(tutor, evidencia.id, nota)

    def test_feedback_queda_como_comentario(self, tutor, evidencia):
        servicios.calificar_tutor(tutor, evidencia.id, 9, 'Revisar bibliografía')

        assert evidencia.comentarios.filter(autor=tutor, texto='Revisar bibliografía').exists()

    def test_actualizar_estado_revision(self, docente, evidencia):
        evidencia = servicios.actualizar_estado_revision(docente, evidencia.id, 'RECHAZADO', 'Falta anexo')

        assert evidencia.estado_revision_docente == 'RECHAZADO'
        assert evidencia.estado_revision_tutor == 'PENDIENTE'
        assert evidencia.comentarios.filter(texto='Falta anexo').exists()

    @pytest.mark.parametrize('rol', ['COMITE', 'DIRECTOR', 'ESTUDIANTE'])
    def test_estado_revision_solo_calificadores(self, crear_usuario, evidencia, rol):
        with pytest.raises(ErrorAutorizacion):
            servicios.actualizar_estado_revision(crear_usuario(rol), evidencia.id, 'APROBADO')

    def test_estado_revision_invalido(self, tutor, evidencia):
        with pytest.raises(ErrorValidacion):
            servicios.actualizar_estado_revision(tutor, evidencia.id, 'PERDIDO')


class TestResumenSemanal:

    def test_resumen_de_dieciseis_semanas(self, estudiante, actividad, docente, tutor, propuesta_con_tutor):
        otra = Actividad.objects.create(propuesta=propuesta_con_tutor, nombre='Paralela', semana=1)
        primera = servicios.entregar_evidencia(estudiante, actividad.id, 1, 'A')
        segunda = servicios.entregar_evidencia(estudiante, otra.id, 1, 'B')
        tercera = servicios.entregar_evidencia(estudiante, actividad.id, 5, 'C')
        servicios.calificar_docente(docente, primera.id, 8)
        servicios.calificar_docente(docente, tercera.id, 7)

        resumen = servicios.resumen_semanal(estudiante, propuesta_con_tutor.id)

        assert len(resumen['semanas']) == 16
        semana1 = resumen['semanas'][0]
        assert semana1['evidencia_id'] == primera.id
        assert semana1['calificacion'] == Decimal('8.00')
        assert [e['id'] for e in semana1['evidencias']] == [primera.id, segunda.id]
        assert resumen['semanas'][4]['evidencia_id'] == tercera.id
        assert resumen['semanas'][1]['evidencias'] == []
        assert resumen['promedio'] == '7.50'

    def test_promedio_sin_notas(self, estudiante, propuesta_con_tutor):
        resumen = servicios.resumen_semanal(estudiante, propuesta_con_tutor.id)

        assert resumen['promedio'] == '0.00'

    def test_estudiante_ajeno_no_ve_resumen(self, otro_estudiante, propuesta_con_tutor):
        with pytest.raises(ErrorAutorizacion):
            servicios.resumen_semanal(otro_estudiante, propuesta_con_tutor.id)

    def test_resumen_general(self, docente, propuesta_con_tutor):
        resumenes = servicios.resumen_semanal_todos(docente)

        assert [r['propuesta_id'] for r in resumenes] == [propuesta_con_tutor.id]

    def test_resumen_general_restringido(self, tutor):
        with pytest.raises(ErrorAutorizacion):
            servicios.resumen_semanal_todos(tutor)

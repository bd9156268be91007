"""
Script para poblar la base de datos con un proceso de titulación de prueba.

Uso: python manage.py shell < scripts/poblador.py
"""

import random
from datetime import timedelta
from decimal import Decimal

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.usuarios.models import User
from apps.prerequisitos.models import CatalogoPrerequisito, EstudiantePrerequisito
from apps.propuestas.models import Propuesta, TrabajoTitulacion, VotacionTutor
from apps.actividades.models import Actividad, Evidencia
from titulacion.configuracion import obtener_reglas

print("Iniciando poblamiento de datos...")

CLAVE_DEMO = 'titulacion123'

PERSONAL = [
    ('director', 'Ana', 'Vera', 'DIRECTOR'),
    ('coordinador', 'Luis', 'Mora', 'COORDINADOR'),
    ('tutor1', 'Carla', 'Ruiz', 'TUTOR'),
    ('tutor2', 'Jorge', 'Paz', 'TUTOR'),
    ('docente', 'Elena', 'Soto', 'DOCENTE_INTEGRACION'),
    ('comite1', 'Mario', 'León', 'COMITE'),
]

PREREQUISITOS = [
    'Certificado de inglés B1',
    'Prácticas preprofesionales',
    'Vinculación con la sociedad',
]

TEMAS = [
    ('Sistema de recomendación de tutorías', 'Inteligencia artificial'),
    ('Plataforma de seguimiento de prácticas', 'Ingeniería de software'),
    ('Análisis de deserción estudiantil', 'Ciencia de datos'),
    ('Aplicación móvil para bibliotecas', 'Desarrollo móvil'),
]


def crear_usuario(username, nombre, apellido, rol):
    usuario, creado = User.objects.get_or_create(
        username=username,
        defaults={
            'first_name': nombre,
            'last_name': apellido,
            'email': f"{username}@titulacion.local",
            'role': rol,
        }
    )
    if creado:
        usuario.set_password(CLAVE_DEMO)
        usuario.save()
    return usuario


def crear_personal():
    print("Creando personal de titulación...")
    return {datos[0]: crear_usuario(*datos) for datos in PERSONAL}


def crear_catalogo():
    print("Creando catálogo de prerrequisitos...")
    catalogo = []
    for orden, nombre in enumerate(PREREQUISITOS, start=1):
        prerequisito, _ = CatalogoPrerequisito.objects.get_or_create(nombre=nombre, defaults={'orden': orden})
        catalogo.append(prerequisito)
    return catalogo


def crear_estudiantes(catalogo):
    print("Creando estudiantes...")
    estudiantes = []
    for i in range(1, len(TEMAS) + 1):
        estudiante = crear_usuario(f"estudiante{i}", f"Estudiante{i}", "Demo", 'ESTUDIANTE')
        estudiantes.append(estudiante)

        for prerequisito in catalogo:
            EstudiantePrerequisito.objects.get_or_create(
                estudiante=estudiante,
                prerequisito=prerequisito,
                defaults={
                    'archivo_url': f"https://archivos.local/{estudiante.username}/{prerequisito.id}.pdf",
                    'cumplido': True,
                    'fecha_cumplimiento': timezone.now(),
                }
            )
    return estudiantes


def crear_propuestas(estudiantes, tutores):
    print("Creando propuestas y asignando tutores...")
    propuestas = []
    for estudiante, (titulo, area), tutor in zip(estudiantes, TEMAS, tutores * len(estudiantes)):
        propuesta, _ = Propuesta.objects.get_or_create(
            estudiante=estudiante,
            defaults={'titulo': titulo, 'area_conocimiento': area, 'estado': 'APROBADA'}
        )
        try:
            with transaction.atomic():
                TrabajoTitulacion.objects.get_or_create(propuesta=propuesta, tutor=tutor)
        except IntegrityError as e:
            print(f"Tutor ya asignado a {propuesta.titulo}: {e}")
        propuestas.append(propuesta)
    return propuestas


def crear_votaciones(propuestas, tutores):
    print("Registrando votaciones de tutores...")
    for propuesta in propuestas:
        if propuesta.votaciones.exists():
            continue
        for prioridad, tutor in enumerate(random.sample(tutores, len(tutores)), start=1):
            VotacionTutor.objects.create(
                propuesta=propuesta,
                estudiante=propuesta.estudiante,
                tutor=tutor,
                prioridad=prioridad,
            )


def crear_actividades(propuestas, docente):
    print("Creando actividades y evidencias...")
    reglas = obtener_reglas()
    contador = 0

    for propuesta in propuestas:
        semanas_entregadas = random.randint(8, reglas.total_semanas)

        for semana in range(1, reglas.total_semanas + 1):
            actividad, creada = Actividad.objects.get_or_create(
                propuesta=propuesta,
                semana=semana,
                defaults={
                    'nombre': f"Avance semana {semana}",
                    'tipo': 'TUTORIA' if semana % 2 else 'DOCENCIA',
                    'fecha_entrega': timezone.now() + timedelta(days=7 * (semana - semanas_entregadas)),
                    'creado_por': docente,
                }
            )
            if not creada or semana > semanas_entregadas:
                continue

            evidencia = Evidencia(
                actividad=actividad,
                semana=semana,
                contenido=f"Avance de la semana {semana}",
                estado='ENTREGADO',
                fecha_entrega=timezone.now(),
                calificacion_tutor=Decimal(str(round(random.uniform(6, 10), 2))),
                estado_revision_tutor='APROBADO',
                calificacion_docente=Decimal(str(round(random.uniform(6, 10), 2))),
                estado_revision_docente='APROBADO',
                ponderacion_tutor=reglas.ponderacion_tutor,
                ponderacion_docente=reglas.ponderacion_docente,
            )
            evidencia.recalcular_nota_final()
            evidencia.save()
            actividad.estado = 'ENTREGADO'
            actividad.save(update_fields=['estado'])
            contador += 1

    print(f"Total evidencias: {contador}")


def poblar():
    with transaction.atomic():
        personal = crear_personal()
        catalogo = crear_catalogo()
        estudiantes = crear_estudiantes(catalogo)
        propuestas = crear_propuestas(estudiantes, [personal['tutor1'], personal['tutor2']])
        crear_votaciones(propuestas, [personal['tutor1'], personal['tutor2']])
        crear_actividades(propuestas, personal['docente'])

    print("Poblamiento completado con éxito")
    print(f"Usuarios demo con contraseña '{CLAVE_DEMO}'")


poblar()

import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail
from django.db import DatabaseError

from .models import Notificacion

logger = logging.getLogger(__name__)


def notificar(usuario, titulo, mensaje, tipo='INFO', evento='', url_accion=None):
    """Crea una notificación interna. Best-effort: un fallo se registra y devuelve None."""
    try:
        return Notificacion.objects.create(
            usuario=usuario,
            titulo=titulo[:150],
            mensaje=mensaje,
            tipo=tipo,
            evento=evento,
            url_accion=url_accion,
        )
    except DatabaseError:
        logger.exception(f"Error creando notificación interna para {usuario.username}")
        return None


def enviar_correo_defensa(destinatario, nombre, rol, tema, fecha, hora, aula, tipo, estudiante_nombre=None):
    """
    Envía el correo de programación de una defensa.

    `tipo` es 'Privada' o 'Pública'. Devuelve True si el backend aceptó el correo;
    los errores de transporte se registran y nunca se propagan.
    """
    if not destinatario:
        return False

    asunto = f"Defensa {tipo} de titulación programada"
    if estudiante_nombre:
        cuerpo = (
            f"Estimado/a {nombre},\n\n"
            f"Ha sido designado/a como {rol} en la defensa {tipo.lower()} del estudiante {estudiante_nombre}.\n"
        )
    else:
        cuerpo = (
            f"Estimado/a {nombre},\n\n"
            f"Su defensa {tipo.lower()} de titulación ha sido programada.\n"
        )
    cuerpo += (
        f"\nTema: {tema}\n"
        f"Fecha: {fecha or '--'}\n"
        f"Hora: {hora or '--:--'}\n"
        f"Aula: {aula or 'Por asignar'}\n"
    )

    try:
        send_mail(asunto, cuerpo, settings.DEFAULT_FROM_EMAIL, [destinatario], fail_silently=False)
    except (SMTPException, OSError):
        logger.exception(f"Error enviando correo de defensa a {destinatario}")
        return False

    logger.info(f"Correo de defensa {tipo} enviado a {destinatario}")
    return True

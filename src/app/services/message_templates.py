"""
Message bodies sent to clients: OTP e-mail / WhatsApp and
templated notifications.
"""

import html
import re
from typing import Dict, Tuple

OTP_EMAIL_SUBJECT = "Código de verificación para firma electrónica"

_OTP_EMAIL_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #1a1a2e; text-align: center;">Verificación de Identidad</h2>
  <p style="color: #333; font-size: 16px;">Para continuar con la firma electrónica de sus documentos, ingrese el siguiente código de verificación:</p>
  <div style="background: #f0f4ff; border: 2px solid #3B82F6; border-radius: 12px; padding: 30px; text-align: center; margin: 20px 0;">
    <span style="font-size: 36px; font-weight: bold; letter-spacing: 8px; color: #1a1a2e;">{code}</span>
  </div>
  <p style="color: #666; font-size: 14px;">Este código es válido por <strong>{minutes} minutos</strong>.</p>
  <p style="color: #666; font-size: 14px;">Si no solicitó este código, puede ignorar este mensaje.</p>
  <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;" />
  <p style="color: #999; font-size: 12px; text-align: center;">
    Este mensaje fue enviado como parte del proceso de firma electrónica conforme a la Ley N° 4017/2010 de la República del Paraguay.
  </p>
</div>
"""

_OTP_TEXT = (
    "Su código de verificación para firma electrónica es: {code}\n"
    "Este código es válido por {minutes} minutos. No lo comparta con nadie."
)

NOTIFICATION_TEMPLATES: Dict[str, str] = {
    "signature_link": (
        "Hola {{clientName}}, tu contrato está listo para firma digital.\n\n"
        "📝 Por favor, accede al siguiente enlace para firmar tu documentación:\n{{signatureUrl}}\n\n"
        "⏰ Este enlace expira el {{expirationDate}}.\n\n"
        "Si tienes alguna pregunta, no dudes en contactarnos.\n\nSaludos,\n{{companyName}}"
    ),
    "questionnaire": (
        "Hola {{clientName}}, necesitamos que completes un breve cuestionario para continuar con tu proceso.\n\n"
        "📋 Accede aquí: {{questionnaireUrl}}\n\n"
        "Este paso es necesario para procesar tu solicitud.\n\nSaludos,\n{{companyName}}"
    ),
    "reminder": (
        "Hola {{clientName}}, te recordamos que tienes documentos pendientes de firma.\n\n"
        "📝 Enlace de firma: {{signatureUrl}}\n\n"
        "⚠️ Este enlace expira el {{expirationDate}}.\n\n"
        "No pierdas tu lugar, firma ahora.\n\nSaludos,\n{{companyName}}"
    ),
    "approval": (
        "🎉 ¡Felicitaciones {{clientName}}!\n\n"
        "Tu solicitud ha sido aprobada exitosamente.\n\n"
        "📄 Número de contrato: {{contractNumber}}\n💰 Plan: {{planName}}\n\n"
        "Pronto recibirás más información sobre tu cobertura.\n\n"
        "Gracias por confiar en nosotros.\n{{companyName}}"
    ),
    "rejection": (
        "Hola {{clientName}},\n\n"
        "Lamentamos informarte que tu solicitud no pudo ser aprobada en esta ocasión.\n\n"
        "{{rejectionReason}}\n\n"
        "Si deseas más información, por favor contáctanos.\n\nSaludos,\n{{companyName}}"
    ),
    "general": "Hola {{clientName}},\n\n{{message}}\n\nSaludos,\n{{companyName}}",
}

NOTIFICATION_SUBJECTS: Dict[str, str] = {
    "signature_link": "Tu contrato está listo para firma",
    "questionnaire": "Cuestionario pendiente",
    "reminder": "Recordatorio: documentos pendientes de firma",
    "approval": "Tu solicitud fue aprobada",
    "rejection": "Actualización sobre tu solicitud",
    "general": "Notificación",
}

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render_otp_email(code: str, expiration_seconds: int) -> Tuple[str, str, str]:
    """Returns (subject, html, text) for an OTP e-mail"""
    minutes = max(expiration_seconds // 60, 1)
    return (
        OTP_EMAIL_SUBJECT,
        _OTP_EMAIL_HTML.format(code=code, minutes=minutes),
        _OTP_TEXT.format(code=code, minutes=minutes),
    )


def render_otp_whatsapp(code: str, expiration_seconds: int) -> str:
    return _OTP_TEXT.format(code=code, minutes=max(expiration_seconds // 60, 1))


def render_notification(template_name: str, data: Dict[str, str]) -> Tuple[str, str, str]:
    """
    Render a notification template.

    Unknown template names use the general template; placeholders
    without data are left as-is.

    Returns:
        (subject, html, text)
    """
    template = NOTIFICATION_TEMPLATES.get(template_name, NOTIFICATION_TEMPLATES["general"])
    text = _PLACEHOLDER.sub(lambda m: str(data.get(m.group(1), m.group(0))), template)
    subject = NOTIFICATION_SUBJECTS.get(template_name, NOTIFICATION_SUBJECTS["general"])
    body_html = "<div style=\"font-family: Arial, sans-serif; white-space: pre-line;\">{}</div>".format(
        html.escape(text)
    )
    return subject, body_html, text

from typing import Literal


Language = Literal["en", "es"]

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "error_title": "Error",
        "date_required": "Please select a date for your reservation.",
        "success_title": "Reservation submitted successfully!",
        "success_email_sent": "We'll confirm your reservation shortly via email.",
        "success_email_failed": (
            "Your reservation was recorded, but we couldn't send a confirmation email. "
            "You'll hear from us soon!"
        ),
        "submission_error_title": "Submission Error",
        "network_error": (
            "There seems to be a network issue. Please check your internet connection and try again."
        ),
        "server_error_no_details": "Server returned an error without details",
        "submit_failed": "Failed to submit reservation. Please try again.",
        "generic_error": "There was a problem submitting your reservation. Please try again.",
        "help_title": "Need Help?",
        "contact_directly": "You may want to contact us directly at {phone} to make your reservation.",
    },
    "es": {
        "error_title": "Error",
        "date_required": "Por favor selecciona una fecha para tu reserva.",
        "success_title": "¡Reserva enviada exitosamente!",
        "success_email_sent": "Confirmaremos tu reserva en breve por correo electrónico.",
        "success_email_failed": (
            "Tu reserva fue registrada, pero no pudimos enviar un correo de confirmación. "
            "¡Pronto tendrás noticias nuestras!"
        ),
        "submission_error_title": "Error de Envío",
        "network_error": (
            "Parece haber un problema de red. Por favor verifica tu conexión a internet e inténtalo de nuevo."
        ),
        "server_error_no_details": "El servidor devolvió un error sin detalles",
        "submit_failed": "Error al enviar la reserva. Por favor, inténtalo de nuevo.",
        "generic_error": "Hubo un problema al enviar tu reserva. Por favor, inténtalo de nuevo.",
        "help_title": "¿Necesitas ayuda?",
        "contact_directly": "Puedes contactarnos directamente al {phone} para hacer tu reserva.",
    },
}


def translate(language: Language, key: str, **values: str) -> str:
    """Look up *key* in the catalog for *language*, falling back to English."""
    catalog = MESSAGES.get(language, MESSAGES["en"])
    return catalog[key].format(**values)

"""Error types raised by services and rendered by the HTTP layer.

Every error carries the HTTP status it maps to and a user-facing message
(Spanish, like the rest of the API surface). Internal details stay in the
server log; only `message` is ever returned to clients.
"""


class QuizError(Exception):
    """Base class for all errors that are converted to a JSON envelope."""
    status_code = 400
    default_message = "Solicitud inválida."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(QuizError):
    """Missing required fields or references to unknown questions."""
    default_message = "Por favor completa los campos de nombre, apellido y correo."


class ConflictError(QuizError):
    """The email or the device already has a stored submission."""
    default_message = "Este correo o dispositivo ya ha enviado el cuestionario."


class AuthError(QuizError):
    status_code = 401
    default_message = "Clave incorrecta."


class NotFoundError(QuizError):
    """Soft failure for lookups: rendered as HTTP 200 with success=false."""
    status_code = 200
    default_message = "No se encontró el cuestionario."


class QuestionBankError(QuizError):
    """The question bank asset is missing or malformed."""
    status_code = 500
    default_message = "Error al cargar preguntas."


class StoreError(QuizError):
    status_code = 500
    default_message = "Error de base de datos. Por favor intenta de nuevo."

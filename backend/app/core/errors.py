"""Domain errors raised by the services layer.

Routers translate these into HTTP responses; services never raise
HTTPException themselves. Every error carries a user-facing message
(Spanish, as shown by the frontend) separate from the technical cause.
"""


class EduGeniusError(Exception):
    """Base class for all service errors."""

    user_message = "Ha ocurrido un error inesperado."

    def __init__(self, user_message: str | None = None, *, cause: Exception | None = None):
        self.user_message = user_message or self.user_message
        self.cause = cause
        super().__init__(self.user_message)


class ConfigurationError(EduGeniusError):
    """A required credential or endpoint is not configured."""

    user_message = "Falta la configuración del servidor."


class GenerationError(EduGeniusError):
    """The generation API failed or returned no usable text."""

    user_message = "No se pudo generar la ficha. Verifica tu conexión o API Key."


class PersistenceError(EduGeniusError):
    """Writing to the resource or profile store failed."""

    user_message = "Error al guardar o generar. Inténtalo de nuevo."


class ResourceNotFoundError(EduGeniusError):
    user_message = "Ficha no encontrada."

class TelemetryError(Exception):
    """Base class for failures that map onto an HTTP error response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(TelemetryError):
    status_code = 400

    def __init__(self, message: str = "Faltan campos: temp, hum o timestamp"):
        super().__init__(message)


class InvalidTimestampError(TelemetryError):
    status_code = 400

    def __init__(self, message: str = "Formato de timestamp inválido"):
        super().__init__(message)


class InvalidValueError(TelemetryError):
    status_code = 400


class MalformedBodyError(TelemetryError):
    status_code = 400

    def __init__(self, message: str = "Cuerpo JSON inválido"):
        super().__init__(message)


class StorageError(TelemetryError):
    """Raised when MongoDB cannot be reached or rejects an operation."""

    status_code = 500

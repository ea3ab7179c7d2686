class HankoSignError(Exception):
    """Base class for domain errors raised by the service layer"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HankoSignError):
    status_code = 400


class NotFoundError(HankoSignError):
    status_code = 404


class PermissionDeniedError(HankoSignError):
    status_code = 403


class ConflictError(HankoSignError):
    status_code = 400


class DocumentNotSignableError(HankoSignError):
    status_code = 400

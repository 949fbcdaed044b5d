"""Domain errors raised by services and translated to HTTP responses in main"""


class ServiceError(Exception):
    """Base class for errors a service reports to its caller"""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ServiceError):
    """Referenced entity does not exist"""

    status_code = 404


class ConflictError(ServiceError):
    """Claim held by someone else, or a duplicate of a pending entity"""

    status_code = 409


class ValidationFailure(ServiceError):
    """Input rejected before any mutation"""

    status_code = 400


class PersistenceFailure(ServiceError):
    """The store rejected or failed a write"""

    status_code = 500

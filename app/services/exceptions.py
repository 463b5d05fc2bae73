class ServiceError(Exception):
    """Base exception for service-level errors."""


class ValidationError(ServiceError):
    pass


class NotFoundError(ServiceError):
    pass

from rest_framework import status
from rest_framework.exceptions import APIException


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConfigurationError(APIException):
    """Cycle settings that cannot produce a valid budget month."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid budget cycle configuration."
    default_code = "configuration_error"


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicting record already exists."
    default_code = "conflict"


class PersistenceError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is unavailable, try again later."
    default_code = "persistence_error"

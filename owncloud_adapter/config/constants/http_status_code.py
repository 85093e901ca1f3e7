from enum import Enum


class HttpStatusCode(Enum):
    """Constants for HTTP status codes"""

    # 2xx Success
    OK = 200
    SUCCESS = 200  # Alias for OK
    CREATED = 201
    NO_CONTENT = 204
    MULTI_STATUS = 207

    # 3xx
    MULTIPLE_CHOICES = 300

    # 4xx Client Errors
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405


class OcsStatusCode(Enum):
    """OCS meta status codes (v1 uses 100, v2 mirrors HTTP)"""

    OK_V1 = 100
    OK_V2 = 200

"""HTTP translation of gifting service errors."""

from rest_framework import serializers, status
from rest_framework.response import Response

from .exceptions import (
    ConflictError,
    ExceedsRemainingError,
    GiftingServiceError,
    InvalidInputError,
    NotFoundError,
    NotPermittedError,
    RotationError,
)

STATUS_BY_CATEGORY = [
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (RotationError, status.HTTP_400_BAD_REQUEST),
    (NotPermittedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class ConflictResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    remaining = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


def error_response(exc: GiftingServiceError) -> Response:
    """Build the error response for a service exception by category."""
    for category, code in STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            break
    else:
        code = status.HTTP_400_BAD_REQUEST

    body = {'error': str(exc)}
    if isinstance(exc, ExceedsRemainingError) and exc.remaining is not None:
        body['remaining'] = str(exc.remaining)
    return Response(body, status=code)

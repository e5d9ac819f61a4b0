"""
Translation of service-layer errors into HTTP errors.

Endpoints catch :class:`ShopError` and raise the ``HTTPException``
returned by :func:`http_error`.  Validation and ambiguity errors carry
structured details so that a client can re-prompt for the offending
field or offer the candidates.
"""

from fastapi import HTTPException, status

from mechanic_shop_api.app.core.exceptions import (
    NotFound,
    PersistenceFailure,
    ResolutionAmbiguous,
    ShopError,
    ValidationError,
)


def http_error(exc: ShopError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"field": exc.field, "reason": exc.reason},
        )
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ResolutionAmbiguous):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "field": exc.field, "candidates": exc.candidates},
        )
    if isinstance(exc, PersistenceFailure):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

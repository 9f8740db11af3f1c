"""Translate service errors into HTTP errors"""
import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException

from core.errors import DependencyError, DomainValidationError, NotFoundError

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str, trace_id: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "trace_id": trace_id
            }
        }
    )


@contextmanager
def translate_errors(trace_id: str) -> Iterator[None]:
    """Map domain, not-found and dependency errors to 400/404/503, anything else to 500"""
    try:
        yield

    except DomainValidationError as e:
        logger.warning("Domain validation error", extra={
            "trace_id": trace_id,
            "error_code": e.code
        })
        raise _error(400, e.code, e.message, trace_id)

    except NotFoundError as e:
        logger.info("Not found", extra={
            "trace_id": trace_id,
            "error_code": e.code
        })
        raise _error(404, e.code, e.message, trace_id)

    except DependencyError as e:
        logger.error("Dependency error", extra={
            "trace_id": trace_id,
            "error_code": e.code
        })
        raise _error(503, e.code, e.message, trace_id)

    except HTTPException:
        raise

    except Exception as e:
        logger.error("Unexpected error", extra={
            "trace_id": trace_id,
            "error_type": type(e).__name__
        }, exc_info=True)
        raise _error(500, "INTERNAL_ERROR", "Internal server error", trace_id)

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Dict
from fastapi.responses import JSONResponse

from app.core.exceptions import LifecycleError


def serialize_datetime(obj: Any) -> Any:
    """Convert datetime and Enum values to JSON-friendly forms"""
    if isinstance(obj, datetime):
        return obj.isoformat()
    elif isinstance(obj, dict):
        return {k: serialize_datetime(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [serialize_datetime(item) for item in obj]
    elif isinstance(obj, Enum):
        return obj.value
    return obj


def success_response(
    message: str = "Success",
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """
    Standard success response

    Args:
        message: Success message
        data: Response data (optional)
        status_code: HTTP status code (default: 200)

    Returns:
        JSONResponse with success format
    """
    response = {
        "success": True,
        "message": message
    }

    if data is not None:
        response["data"] = serialize_datetime(data)

    return JSONResponse(content=response, status_code=status_code)


def error_response(
    message: str = "Error",
    status_code: int = 400
) -> JSONResponse:
    """
    Standard error response

    Args:
        message: Error message
        status_code: HTTP status code (default: 400)

    Returns:
        JSONResponse with error format
    """
    return JSONResponse(
        content={
            "success": False,
            "message": message
        },
        status_code=status_code
    )


def lifecycle_error_response(error: LifecycleError) -> JSONResponse:
    """Map a lifecycle error to its HTTP status"""
    return error_response(message=error.message, status_code=error.status_code)


def validation_error_response(
    message: str = "Validation error",
    errors: Optional[Dict[str, Any]] = None,
    status_code: int = 400
) -> JSONResponse:
    """
    Standard validation error response

    Args:
        message: Validation error message
        errors: Dictionary of validation errors (optional)
        status_code: HTTP status code (default: 400, same as InvalidArgumentError)

    Returns:
        JSONResponse with validation error format
    """
    response = {
        "success": False,
        "message": message
    }

    if errors:
        response["errors"] = errors

    return JSONResponse(content=response, status_code=status_code)

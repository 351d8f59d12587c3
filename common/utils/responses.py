"""
Standard API response helpers.

Provides consistent response formatting for success and error cases.

Example:
    from common.utils import success_response, error_response

    @router.get("/me")
    async def me(context: AuthContext = Depends(require_auth)):
        return success_response(public_admin(context.admin))
"""

from typing import Any, Optional, Dict


def success_response(
    data: Any = None,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard success response.

    Args:
        data: The response data (can be dict, list, or any serializable type)
        message: Optional success message

    Returns:
        Dictionary with success=True and optional data/message
    """
    response: Dict[str, Any] = {"success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response body.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "ADMIN_NOT_FOUND")
        details: Additional error details
        error: Underlying error text, for operator diagnosis

    Returns:
        Dictionary with message and optional code/details/error
    """
    body: Dict[str, Any] = {"message": message}

    if code:
        body["code"] = code

    if details is not None:
        body["details"] = details

    if error:
        body["error"] = error

    return body

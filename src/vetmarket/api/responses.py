"""
Helpers building the ``{success, data | message}`` response envelope.
"""

from typing import Any, Dict, Iterable, List, Optional, Type

from fastapi.responses import JSONResponse

from ..schemas.common import CamelModel


def serialize(schema: Type[CamelModel], obj: Any) -> Dict[str, Any]:
    """Validate an ORM object through ``schema`` and dump it as camelCase JSON."""
    return schema.model_validate(obj).to_api()


def serialize_many(schema: Type[CamelModel], items: Iterable[Any]) -> List[Dict[str, Any]]:
    return [serialize(schema, item) for item in items]


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = 200,
    **extra: Any,
) -> JSONResponse:
    """
    Build a successful response envelope.

    Args:
        data: Payload placed under ``data`` (omitted when None)
        message: Human-readable message (omitted when None)
        status_code: HTTP status of the response
        **extra: Additional top-level keys such as ``count`` or ``pagination``

    Returns:
        JSONResponse with ``success: true``
    """
    content: Dict[str, Any] = {"success": True}
    if message is not None:
        content["message"] = message
    if data is not None:
        content["data"] = data
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)

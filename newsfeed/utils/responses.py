"""
Response envelopes shared by the service layer and the CLI.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def create_response(message: str, data: Any = None, meta: Optional[Dict] = None) -> Dict[str, Any]:
    """
    Build a success envelope.

    Args:
        message: Human readable message
        data: Payload, omitted when None
        meta: Extra metadata such as pagination, omitted when None

    Returns:
        Dict with success, message, timestamp and the optional parts
    """
    response = {
        'success': True,
        'message': message,
        'timestamp': _timestamp(),
    }
    if data is not None:
        response['data'] = data
    if meta is not None:
        response['meta'] = meta
    return response


def create_error_response(message: str, errors: Any = None, code: Optional[int] = None) -> Dict[str, Any]:
    response = {
        'success': False,
        'message': message,
        'timestamp': _timestamp(),
    }
    if errors is not None:
        response['errors'] = errors
    if code is not None:
        response['code'] = code
    return response


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    """Pagination block; ``total`` is the size of the full result before slicing."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNext': page < total_pages,
        'hasPrev': page > 1,
    }


def create_paginated_response(message: str, data: Any, pagination: Dict[str, int]) -> Dict[str, Any]:
    return create_response(message, data, {
        'pagination': pagination_meta(pagination['page'], pagination['limit'], pagination['total']),
    })

"""
HTTP: the backend collaborator.

    from storefront.http import ApiClient, ApiError

    async with ApiClient(settings.api_url) as api:
        try:
            status = await api.get(f"/checkout/status/{order_id}")
        except ApiError as e:
            print(error_message(e))
"""

from storefront.http._client import ApiClient, Method, Files
from storefront.http._errors import (
    ApiError,
    DEFAULT_ERROR_MESSAGE,
    error_message,
    message_from_body,
)

__all__ = (
    "ApiClient",
    "Method",
    "Files",
    "ApiError",
    "DEFAULT_ERROR_MESSAGE",
    "error_message",
    "message_from_body",
)

from .yume_api import ApiDecodeError, ApiError, ApiStatusError, ApiTransportError, YumeApiClient

__all__ = [
    "ApiError",
    "ApiStatusError",
    "ApiTransportError",
    "ApiDecodeError",
    "YumeApiClient",
]

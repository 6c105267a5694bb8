from __future__ import annotations


class ModelJoinError(Exception):
    pass


class ConfigurationError(ModelJoinError):
    pass


class MissingApiKeyError(ConfigurationError):
    def __init__(self, message: str | None = None):
        super().__init__(
            message or "No API key configured. Set MODELJOIN_AA_API_KEY (or AA_API_KEY) to fetch benchmark data."
        )


class CacheError(ModelJoinError):
    pass


class APIError(ModelJoinError):
    def __init__(self, status_code: int, message: str, response_body: str | None = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(f"HTTP {status_code}: {message}")


class InvalidApiKeyError(APIError):
    pass


class RateLimitError(APIError):
    pass


class ServerError(APIError):
    pass


__all__ = [
    "ModelJoinError",
    "ConfigurationError",
    "MissingApiKeyError",
    "CacheError",
    "APIError",
    "InvalidApiKeyError",
    "RateLimitError",
    "ServerError",
]

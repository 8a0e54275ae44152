from fastapi import status


class GatewayError(Exception):
    """Base for failures that are reported to the caller as ``{error, details}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, details: str | None = None):
        super().__init__(details or self.error)
        self.details = details

    def to_payload(self) -> dict:
        payload: dict = {"error": self.error}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidInput(GatewayError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_input"


class SigningError(GatewayError):
    error = "failed_to_sign"


class PayloadTooLarge(GatewayError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    error = "payload_too_large"


class UpstreamPutFailed(GatewayError):
    status_code = status.HTTP_502_BAD_GATEWAY
    error = "upstream_put_failed"

    def __init__(self, upstream_status: int | None, body: str = ""):
        self.upstream_status = upstream_status
        self.body = body
        if upstream_status is None:
            details = f"store request failed: {body}"
        else:
            details = f"store responded {upstream_status}: {body}"
        super().__init__(details)


class ListingError(GatewayError):
    error = "failed_to_list"


class CorsRejected(GatewayError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "origin_not_allowed"

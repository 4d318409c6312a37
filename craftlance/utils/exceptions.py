class ServiceError(Exception):
    status = 400

    def __init__(self, code="SERVICE_ERROR", message="Service error", details=None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(ServiceError):
    status = 422

    def __init__(self, message, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class NotFound(ServiceError):
    status = 404

    def __init__(self, message="Resource not found", details=None):
        super().__init__("NOT_FOUND", message, details)


class Forbidden(ServiceError):
    status = 403

    def __init__(self, message="Access denied", details=None):
        super().__init__("FORBIDDEN", message, details)


class InvalidTransition(ServiceError):
    status = 409

    def __init__(self, message, details=None):
        super().__init__("INVALID_TRANSITION", message, details)


class Conflict(ServiceError):
    status = 409

    def __init__(self, message, details=None):
        super().__init__("CONFLICT", message, details)


class Unauthorized(ServiceError):
    """Webhook signature mismatch. Rendered as a bare 403."""
    status = 403

    def __init__(self, message="Invalid signature"):
        super().__init__("UNAUTHORIZED", message)


class StoreError(ServiceError):
    status = 500

    def __init__(self, message="Internal server error"):
        super().__init__("SERVER_ERROR", message)


class GatewayError(ServiceError):
    status = 502

    def __init__(self, message="Payment gateway unavailable"):
        super().__init__("GATEWAY_ERROR", message)

"""Error types raised by services and turned into JSON responses in app.main."""


class StorefrontError(Exception):
    """Base class for errors that map onto an HTTP status."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationFailed(StorefrontError):
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class OutOfStockError(StorefrontError):
    def __init__(self, message: str = "Product is out of stock."):
        super().__init__(message, status_code=400)


class NotFoundError(StorefrontError):
    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class PaymentSessionError(StorefrontError):
    """The provider could not create a checkout session. Never carries provider detail."""

    def __init__(self):
        super().__init__("payment session failed", status_code=502)


class InvalidSignatureError(StorefrontError):
    def __init__(self, message: str = "Webhook signature verification failed"):
        super().__init__(message, status_code=400)


class ForbiddenError(StorefrontError):
    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, status_code=403)

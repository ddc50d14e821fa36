"""Exception hierarchy for the Hyperliquid client.

This module defines the public exception hierarchy for the entire library. All
exceptions raised by this library inherit from BaseError.

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - API server returned an error response
├── TransportError - Network/protocol-level errors during transmission
├── ValidationError - Client-side input validation failures
├── SigningError - A signature could not be produced
└── OperationCancelled - A cancellation token fired
"""

from typing import Any


class BaseError(Exception):
    """Base exception for all Hyperliquid client errors.

    All exceptions raised by this library inherit from this class, allowing users
    to catch all library errors with a single except clause.

    This exception should not be raised directly. Use one of the specific subclasses
    instead (ExchangeError, TransportError, ValidationError, SigningError).
    """

    pass


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """Exception raised when the API server returns an error response.

    This exception is raised when a request successfully reaches the API server
    and the server returns a valid response, but that response indicates an error
    condition (e.g., invalid signature, insufficient margin, rate limit exceeded).

    ExchangeError indicates that:
    - The network connection succeeded
    - The request was properly formatted and transmitted
    - A server processed the request and returned an error response
    """

    pass


class ApiRequestError(ExchangeError):
    """Raised when the exchange endpoint answers with an error status.

    The venue reports most failures with a 200 status and either
    ``{"status": "err", "response": "..."}`` or per-order ``{"error": "..."}``
    entries, so these are detected from the body rather than the HTTP status.
    """

    response: Any
    message: str

    def __init__(self, message: str, response: Any = None):
        """Initialize an ApiRequestError.

        Args:
            message: Error message extracted from the response.
            response: The raw decoded response body.

        """
        self.message = message
        self.response = response
        super().__init__(message)


class BadHttpStatus(ExchangeError):
    """Raised when response status from exchange is not 2XX."""

    status_code: int
    message: str

    def __init__(self, status_code: int, message: str):
        """Initialize a BadHttpStatus error.

        Args:
            status_code: The HTTP status code returned by the server.
            message: Description of the HTTP error.

        """
        self.status_code = status_code
        self.message = message
        super().__init__(f"{message} (status: {status_code})")


## 5xx status errors - unexpected - should be reported


class InternalServerError(BadHttpStatus):
    """Raised when the server returns a 500 Internal Server Error."""

    pass


class BadGateway(BadHttpStatus):
    """Raised when the server returns a 502 Bad Gateway error."""

    pass


class ServiceUnavailable(BadHttpStatus):
    """Raised when the server returns a 503 Service Unavailable error."""

    pass


class GatewayTimeout(BadHttpStatus):
    """Raised when the server returns a 504 Gateway Timeout error."""

    pass


## 4xx status errors


class BadRequest(BadHttpStatus):
    """Raised when the server returns a 400 Bad Request error."""

    pass


class NotFound(BadHttpStatus):
    """Raised when the server returns a 404 Not Found error."""

    pass


class RateLimited(BadHttpStatus):
    """Raised when the server returns a 429 Rate Limited error."""

    pass


class UnprocessableEntity(BadHttpStatus):
    """Raised when the server returns a 422 Unprocessable Entity error.

    The exchange endpoint uses this status when the request body cannot be
    deserialized into a known action.
    """

    pass


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """Exception raised for errors in the process of transporting data to/from the API server.

    This exception is raised when there's a problem in the process of transporting
    data to or from the API server, either in the local networking stack before data
    is sent, during transmission over the network, or when receiving and processing
    data.

    TransportError indicates that:
    - The error occurred in the process of transporting data
    - Valid application-level data was not successfully exchanged
    - The error could be transient and may succeed on retry

    Common causes include serialization failures, DNS resolution failures,
    connection timeouts, dropped connections and malformed response bodies.
    """

    pass


class HttpConnectionError(TransportError):
    """Raised when a connection cannot be established or is lost."""

    def __init__(self, message: str, url: str | None = None):
        """Initialize an HttpConnectionError.

        Args:
            message: Description of the connection error.
            url: The URL that failed to connect, if available.

        """
        self.message = message
        self.url = url
        if url:
            super().__init__(f"{message} (url: {url})")
        else:
            super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when a request or connection times out."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        """Initialize a TransportTimeoutError.

        Args:
            message: Description of the timeout error.
            timeout_seconds: The timeout duration in seconds, if available.

        """
        self.message = message
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            super().__init__(f"{message} (timeout: {timeout_seconds}s)")
        else:
            super().__init__(message)


class DeserializationError(TransportError):
    """Raised when response data cannot be deserialized/decoded."""

    def __init__(self, message: str):
        """Initialize a DeserializationError.

        Args:
            message: Description of the deserialization error.

        """
        self.message = message
        super().__init__(message)


class SerializationError(TransportError):
    """Raised when request data cannot be serialized/encoded.

    Also raised when a canonical action cannot be packed with MessagePack
    for hashing.
    """

    def __init__(self, message: str):
        """Initialize a SerializationError.

        Args:
            message: Description of the serialization error.

        """
        self.message = message
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """Exception raised for client-side input validation failures.

    This exception is raised when input parameters fail validation checks before
    any request is sent to the API server. ValidationError indicates a problem
    with the arguments provided to library methods, such as missing required
    fields, invalid types, out-of-range values, or malformed data.

    ValidationError indicates that:
    - No network request was attempted
    - The error is due to invalid input from the caller
    - The error can be fixed by correcting the input parameters
    """

    pass


class MissingCredentialsError(ValidationError):
    """Raised when required authentication credentials are missing."""

    def __init__(self, credential_type: str = "private key"):
        """Initialize a MissingCredentialsError.

        Args:
            credential_type: The type of credential that is missing (default: "private key").

        """
        self.credential_type = credential_type
        super().__init__(f"{credential_type} is not set")


class InvalidPrivateKeyError(ValidationError):
    """Raised when key material is not a valid secp256k1 private key.

    The key must be 32 bytes of hex (with or without a ``0x`` prefix) whose
    integer value lies in ``[1, N-1]`` for the curve order ``N``.
    """

    def __init__(self, message: str = "Invalid private key"):
        """Initialize an InvalidPrivateKeyError.

        Args:
            message: Description of what is wrong with the key. Never includes
                the key itself.

        """
        self.message = message
        super().__init__(message)


class SchemaEncodingError(ValidationError):
    """Raised when a value cannot be encoded against an EIP-712 type schema."""

    def __init__(
        self,
        message: str,
        type_name: str | None = None,
        field_name: str | None = None,
    ):
        """Initialize a SchemaEncodingError.

        Args:
            message: Description of the encoding failure.
            type_name: The EIP-712 type that failed to encode, if known.
            field_name: The struct field being encoded, if known.

        """
        self.message = message
        self.type_name = type_name
        self.field_name = field_name
        context = []
        if field_name is not None:
            context.append(f"field: {field_name}")
        if type_name is not None:
            context.append(f"type: {type_name}")
        if context:
            super().__init__(f"{message} ({', '.join(context)})")
        else:
            super().__init__(message)


# ============================================================================
# SIGNING ERROR
# ============================================================================


class SigningError(BaseError):
    """Exception raised when a signature could not be produced.

    SigningError indicates that:
    - No request was sent to the exchange
    - Either the wallet could not be used or it refused to sign
    - The caller decides whether to retry; the library never does
    """

    pass


class UnsupportedWalletError(SigningError):
    """Raised when a wallet value matches none of the supported shapes."""

    def __init__(self, wallet: object):
        """Initialize an UnsupportedWalletError.

        Args:
            wallet: The value that could not be used as a wallet.

        """
        self.wallet_type = type(wallet).__name__
        super().__init__(
            f"Unsupported wallet of type {self.wallet_type}: expected a private key "
            "or an object exposing sign_typed_data/signTypedData/_signTypedData"
        )


class DelegatedSignerError(SigningError):
    """Raised when an externally supplied signer rejects or fails a request.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, wallet_index: int | None = None):
        """Initialize a DelegatedSignerError.

        Args:
            message: Description of the signer failure.
            wallet_index: Position of the wallet in a multi-sig signer list, if any.

        """
        self.message = message
        self.wallet_index = wallet_index
        if wallet_index is not None:
            super().__init__(f"{message} (wallet index: {wallet_index})")
        else:
            super().__init__(message)


class OperationCancelled(BaseError):
    """Raised when a cancellation token fires before a signature or response is produced.

    Cancellation is neither a signing nor a transport failure, so it sits
    directly under BaseError.
    """

    def __init__(self, reason: str | None = None, wallet_index: int | None = None):
        """Initialize an OperationCancelled error.

        Args:
            reason: The reason passed to the cancellation token, if any.
            wallet_index: Position of the wallet in a multi-sig signer list, if any.

        """
        self.reason = reason
        self.wallet_index = wallet_index
        message = "Operation cancelled"
        if reason:
            message = f"{message}: {reason}"
        if wallet_index is not None:
            message = f"{message} (wallet index: {wallet_index})"
        super().__init__(message)


class MultiSigPartialFailure(SigningError):
    """Raised when any signer of a multi-sig request fails.

    No partial envelope is ever returned. The failing signer's exception is
    available as ``__cause__`` and as ``error``.
    """

    def __init__(self, wallet_index: int, error: BaseException):
        """Initialize a MultiSigPartialFailure.

        Args:
            wallet_index: Position of the failing wallet in the signer list.
            error: The exception raised by that wallet's signing branch.

        """
        self.wallet_index = wallet_index
        self.error = error
        super().__init__(
            f"Multi-sig signer at index {wallet_index} failed: {error}"
        )

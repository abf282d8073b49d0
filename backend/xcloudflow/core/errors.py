"""Error Hierarchy — typed, categorized exceptions for every StackFlow failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error knows its JSON-RPC error code (rpc_code) and renders via to_rpc_error()
    - ValidationError carries a structured path + reason; message is "<path>: <reason>"
    - Pipeline errors (parse/schema/validation/not-found) are recoverable;
      infrastructure errors are critical

Design Decisions:
    - Single hierarchy with XCloudFlowError base: the dispatcher catches the base
      class once and maps it to an RPC error object (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass
from enum import Enum


# JSON-RPC 2.0 error codes used by the MCP endpoint
RPC_PARSE_ERROR = -32700
RPC_METHOD_NOT_FOUND = -32601
RPC_INVALID_PARAMS = -32602
RPC_APPLICATION_ERROR = -32000


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    PARSE = "parse"
    SCHEMA = "schema"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PROTOCOL = "protocol"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the error happened, for structured logs."""
    stack: str | None = None
    tool_name: str | None = None
    rpc_method: str | None = None


class XCloudFlowError(Exception):
    """Base exception for all xcloudflow errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        rpc_code: int = RPC_APPLICATION_ERROR,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.rpc_code = rpc_code

    def to_rpc_error(self) -> dict:
        """Convert to a JSON-RPC error object."""
        return {"code": self.rpc_code, "message": self.message}


# ─── Pipeline Errors ────────────────────────────────────────────

class ParseError(XCloudFlowError):
    """Input bytes are not well-formed YAML."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"yaml parse: {detail}", "PARSE_ERROR", ErrorCategory.PARSE,
            ErrorSeverity.ERROR, context,
        )
        self.detail = detail


class SchemaError(XCloudFlowError):
    """Document tree has the wrong shape (e.g. root is not a mapping)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCHEMA_ERROR", ErrorCategory.SCHEMA,
            ErrorSeverity.ERROR, context,
        )


class ValidationError(XCloudFlowError):
    """StackFlow business rule violated at a specific document path."""
    def __init__(
        self, path: str, reason: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{path}: {reason}" if path else reason,
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.path = path
        self.reason = reason

    def within(self, prefix: str) -> "ValidationError":
        """Re-anchor this error under an enclosing document path."""
        if not self.path:
            path = prefix
        elif self.path.startswith("["):
            path = f"{prefix}{self.path}"
        else:
            path = f"{prefix}.{self.path}"
        return ValidationError(path, self.reason, self.context)


class NotFoundError(XCloudFlowError):
    """A referenced entity (e.g. environment) does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )


class ProtocolError(XCloudFlowError):
    """Malformed RPC envelope, unknown method, or unknown tool."""
    def __init__(
        self, message: str, rpc_code: int = RPC_APPLICATION_ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "PROTOCOL_ERROR", ErrorCategory.PROTOCOL,
            ErrorSeverity.WARNING, context, rpc_code,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class DatabaseError(XCloudFlowError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation

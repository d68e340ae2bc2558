"""Domain exception hierarchy for type-safe error handling.

This module provides the base exception hierarchy for all domain errors.
Exceptions include structured error codes and context for consistent
API error handling and logging across packages.

Two families matter to tenancy:

- ``NoTenantError`` is raised per request when a caller demands a tenant and
  none could be resolved. The HTTP layer maps it to a 4xx response.
- ``VariantConfigurationError`` and its subclasses are raised while the
  capability registry is being built. They are fatal and abort startup.

Example:
    >>> from polytenant.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("Order", "01HZX3")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "DomainError",
    "DuplicateVariantError",
    "NoTenantError",
    "NotFoundError",
    "UnknownVariantConfigurationError",
    "ValidationError",
    "VariantConfigurationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Provides error code and structured context for debugging. All domain
    exceptions inherit from this class to enable consistent API error
    handling and logging.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (tenant ids, capability names).

    Example:
        >>> raise DomainError("Operation failed", context={"order_guid": "123"})
        DomainError: Operation failed (order_guid=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
                     Values are typically strings, UUIDs, or primitive types.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "Order").
            resource_id: Identifier of missing resource. UUID is converted to string.
            **extra_context: Additional debugging context (e.g., tenant_id).
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} not found: {resource_id}"
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message, context)


class ValidationError(DomainError):
    """Raised when input fails domain validation rules.

    Maps to HTTP 422 Unprocessable Entity. Use for domain rule violations
    on command input, not for Pydantic schema validation.

    Example:
        >>> raise ValidationError("details", "Order details cannot be empty")
        ValidationError: Validation failed for 'details': Order details cannot be empty
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation.
            reason: Human-readable validation failure reason.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        message = f"Validation failed for '{field}': {reason}"
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(message, context)


class AuthenticationError(DomainError):
    """Raised when an endpoint needs an authenticated principal and has none.

    Maps to HTTP 401 Unauthorized. Authentication itself happens upstream;
    this only signals that no principal reached the handler.
    """

    error_code: str = "AUTHENTICATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when the principal may not touch the requested resource.

    Maps to HTTP 403 Forbidden.
    """

    error_code: str = "AUTHORIZATION_ERROR"


class NoTenantError(DomainError):
    """Raised when tenant context is required but none was resolved.

    Only ``TenantResolver.required()`` raises this. It is recoverable by the
    caller (the HTTP layer returns 400) and is never swallowed by the core.

    Example:
        >>> raise NoTenantError()
        NoTenantError: Unable to determine tenant context
    """

    error_code: str = "NO_TENANT"

    def __init__(self, message: str = "Unable to determine tenant context", **context: Any) -> None:
        super().__init__(message, context)


class VariantConfigurationError(DomainError):
    """Raised when capability variants are registered inconsistently.

    Raised while the binding registry is assembled at process start, never
    while serving requests.
    """

    error_code: str = "VARIANT_CONFIGURATION_ERROR"


class UnknownVariantConfigurationError(VariantConfigurationError):
    """Raised when a capability has no Default variant.

    Attributes:
        capability: Name of the capability missing its default.
    """

    error_code: str = "UNKNOWN_VARIANT_CONFIGURATION"

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(
            f"Capability '{capability}' has no default variant registered",
            {"capability": capability},
        )


class DuplicateVariantError(VariantConfigurationError):
    """Raised when a (capability, tenant) pair is registered twice.

    ``tenant`` is ``None`` for a duplicate default.
    """

    error_code: str = "DUPLICATE_VARIANT"

    def __init__(self, capability: str, tenant: str | None) -> None:
        self.capability = capability
        self.tenant = tenant
        target = f"tenant '{tenant}'" if tenant is not None else "the default slot"
        super().__init__(
            f"Capability '{capability}' already has a variant for {target}",
            {"capability": capability, "tenant": tenant or "<default>"},
        )

"""FastAPI application factory with entry-point auto-discovery.

Provides :func:`create_app` which builds the tenancy runtime and discovers
and wires routers, middleware, error handlers, and lifespan hooks from
installed polytenant packages.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from polytenant.foundation.application import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    build_runtime,
    discover,
)
from polytenant.foundation.application.runtime import VARIANT_GROUP
from polytenant.infra.fastapi.lifespan import compose_lifespan
from polytenant.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

    from polytenant.foundation.application import TenancyRuntime, VariantContribution

logger = logging.getLogger(__name__)

# Entry point group constants
GROUP_ROUTERS = "polytenant.routers"
GROUP_MIDDLEWARE = "polytenant.middleware"
GROUP_ERROR_HANDLERS = "polytenant.error_handlers"
GROUP_LIFESPAN = "polytenant.lifespan"
GROUP_VARIANTS = VARIANT_GROUP


def create_app(
    settings: AppSettings | None = None,
    *,
    runtime: TenancyRuntime | None = None,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    extra_variants: list[VariantContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create a FastAPI application with auto-discovered contributions.

    The tenancy runtime is built first, so a capability without a Default
    variant or a duplicate variant fails here rather than on a request. It
    is stored on ``app.state.tenancy`` for ``TenantBindingMiddleware``.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        runtime: Prebuilt tenancy runtime. Built from ``settings.tenancy``
            and discovered variants when omitted.
        extra_routers: Additional routers to include beyond discovered ones.
        extra_middleware: Additional middleware beyond discovered ones.
        extra_lifespan_hooks: Additional lifespan hooks beyond discovered ones.
        extra_error_handlers: Additional error handlers beyond discovered ones.
        extra_variants: Additional capability variants beyond discovered ones.
            Ignored when ``runtime`` is given.
        exclude_groups: Entry point groups to skip entirely.
        exclude_names: Specific entry point names to skip across all groups.

    Returns:
        Configured FastAPI application instance.

    Raises:
        VariantConfigurationError: If the capability variants are inconsistent.
    """
    settings = settings or AppSettings()
    _exclude_groups = exclude_groups if exclude_groups is not None else settings.exclude_groups
    _exclude_names = exclude_names if exclude_names is not None else settings.exclude_entry_points

    # --- Build the tenancy runtime (fails fast on bad variants) ---
    if runtime is None:
        runtime = build_runtime(
            settings.tenancy,
            variants=extra_variants or (),
            discover_variants=GROUP_VARIANTS not in _exclude_groups,
            exclude_names=_exclude_names,
        )

    # --- Discover lifespan hooks ---
    lifespan_hooks: list[LifespanContribution] = list(extra_lifespan_hooks or [])
    if GROUP_LIFESPAN not in _exclude_groups:
        for contrib in discover(GROUP_LIFESPAN, exclude_names=_exclude_names):
            value = contrib.value
            if isinstance(value, LifespanContribution):
                lifespan_hooks.append(value)
            else:
                # Assume bare async context manager factory; wrap with default priority
                lifespan_hooks.append(LifespanContribution(hook=value))

    composed_lifespan = compose_lifespan(lifespan_hooks)

    # --- Create FastAPI app ---
    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=composed_lifespan,
    )
    app.state.tenancy = runtime

    # --- CORS (always added, configured via settings) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )

    # --- Discover and register middleware ---
    middleware_contribs: list[MiddlewareContribution] = list(extra_middleware or [])
    if GROUP_MIDDLEWARE not in _exclude_groups:
        for contrib in discover(GROUP_MIDDLEWARE, exclude_names=_exclude_names):
            value = contrib.value
            if isinstance(value, MiddlewareContribution):
                middleware_contribs.append(value)
            else:
                logger.warning(
                    "middleware_entry_point_invalid",
                    extra={"entry_point": contrib.name, "value_type": type(value).__name__},
                )

    # Sort by priority ascending, then add in reverse (LIFO for Starlette)
    middleware_contribs.sort(key=lambda m: m.priority)
    for mw in reversed(middleware_contribs):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.info(
            "middleware_registered",
            extra={"middleware": mw.middleware_class.__name__, "priority": mw.priority},
        )

    # --- Discover and register error handlers ---
    error_handler_contribs: list[ErrorHandlerContribution] = list(extra_error_handlers or [])
    if GROUP_ERROR_HANDLERS not in _exclude_groups:
        for contrib in discover(GROUP_ERROR_HANDLERS, exclude_names=_exclude_names):
            value = contrib.value
            if isinstance(value, ErrorHandlerContribution):
                error_handler_contribs.append(value)
            elif callable(value):
                # Allow a register function: register(app) -> None
                value(app)
            else:
                logger.warning(
                    "error_handler_entry_point_invalid",
                    extra={"entry_point": contrib.name, "value_type": type(value).__name__},
                )

    for eh in error_handler_contribs:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info(
            "error_handler_registered",
            extra={"exception": eh.exception_class.__name__},
        )

    # --- Discover and include routers ---
    routers: list[APIRouter] = list(extra_routers or [])
    if GROUP_ROUTERS not in _exclude_groups:
        for contrib in discover(GROUP_ROUTERS, exclude_names=_exclude_names):
            routers.append(contrib.value)

    for router in routers:
        app.include_router(router)
        logger.info("router_included", extra={"prefix": router.prefix or "/"})

    return app

"""FastAPI application factory for claimcalc."""

from __future__ import annotations

from fastapi import FastAPI

from claimcalc.api.routers import arps, incentives, policy


def create_app(config_path: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Path to a claimcalc YAML policy file, or None for
            the built-in policy tables.

    Returns:
        Configured FastAPI instance with all routers mounted.
    """
    from claimcalc.api.deps import set_config_path

    set_config_path(config_path)

    application = FastAPI(
        title="claimcalc API",
        description="Incentive calculation and ARPS scoring for research claims",
        version="0.1.0",
    )

    application.include_router(incentives.router)
    application.include_router(arps.router)
    application.include_router(policy.router)

    return application

"""
FastAPI dependencies.

Routes get the service bundle built by the application lifespan through
`Depends(get_services)`; tests can override it with
`app.dependency_overrides[get_services]`.
"""

from fastapi import Request

from evolvedash.core.services import Services


def get_services(request: Request) -> Services:
    """Return the Services bundle stored on the application state."""
    services: Services = request.app.state.services
    return services

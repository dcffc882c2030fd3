"""
Service layer: generator, orchestrator, dashboard, and the composition root.
"""

from evolvedash.core.services.container import Services, open_services
from evolvedash.core.services.dashboard import DashboardData, DashboardService, SpecSummary
from evolvedash.core.services.generator import (
    GenerationOutcome,
    GeneratorService,
    build_backend,
)
from evolvedash.core.services.orchestrator import (
    ProcessingResult,
    RequestOrchestrator,
    SubmitResult,
)

__all__ = [
    "DashboardData",
    "DashboardService",
    "GenerationOutcome",
    "GeneratorService",
    "ProcessingResult",
    "RequestOrchestrator",
    "Services",
    "SpecSummary",
    "SubmitResult",
    "build_backend",
    "open_services",
]

"""
EvolveDash - Self-Evolving Dashboard Backend

Accepts natural-language feature requests, hands them to an external code
generator, and exposes the generated UI components to the dashboard frontend.
"""

__version__ = "0.3.0-dev"

# Re-export core models for convenience
from evolvedash.core.config.models import DashConfig
from evolvedash.core.requests.models import FeatureRequest, FeatureRequestStatus

__all__ = ["DashConfig", "FeatureRequest", "FeatureRequestStatus", "__version__"]

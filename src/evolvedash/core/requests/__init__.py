"""Feature request models and the SQLite-backed request log."""

from evolvedash.core.requests.log import FeatureRequestLog
from evolvedash.core.requests.models import (
    FeatureRequest,
    FeatureRequestStats,
    FeatureRequestStatus,
)

__all__ = [
    "FeatureRequest",
    "FeatureRequestLog",
    "FeatureRequestStats",
    "FeatureRequestStatus",
]

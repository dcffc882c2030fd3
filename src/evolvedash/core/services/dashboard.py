"""
Dashboard data aggregation.

Builds the single payload the frontend loads on start: recent requests,
request counts, the feature registry and a summary of the spec document.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from evolvedash.core.discovery import FeatureRegistry, GeneratedFeature
from evolvedash.core.errors import StoreError
from evolvedash.core.requests import FeatureRequest, FeatureRequestLog, FeatureRequestStats
from evolvedash.core.spec import SpecStore

logger = logging.getLogger(__name__)


class SpecSummary(BaseModel):
    """Counts from the spec document."""

    feature_count: int = 0
    workflow_count: int = 0

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardData(BaseModel):
    """Payload for GET /api/dashboard/data."""

    recent_feature_requests: list[FeatureRequest] = Field(default_factory=list)
    feature_request_stats: FeatureRequestStats = Field(default_factory=FeatureRequestStats)
    features: list[GeneratedFeature] = Field(default_factory=list)
    spec: SpecSummary = Field(default_factory=SpecSummary)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DashboardService:
    """Read-only view over the request log, registry and spec store."""

    def __init__(
        self,
        request_log: FeatureRequestLog,
        registry: FeatureRegistry,
        spec_store: SpecStore,
        recent_limit: int = 10,
    ) -> None:
        self.request_log = request_log
        self.registry = registry
        self.spec_store = spec_store
        self.recent_limit = recent_limit

    def spec_summary(self) -> SpecSummary:
        """
        Count features and workflows in the spec document.

        Raises:
            StoreError: If the spec document can't be read
        """
        document = self.spec_store.read_spec()
        return SpecSummary(
            feature_count=len(document["features"]),
            workflow_count=len(document["workflows"]),
        )

    def dashboard_data(self) -> DashboardData:
        """Assemble the dashboard payload."""
        try:
            summary = self.spec_summary()
        except StoreError as e:
            logger.warning("Dashboard spec summary unavailable: %s", e)
            summary = SpecSummary()

        return DashboardData(
            recent_feature_requests=self.request_log.list(limit=self.recent_limit),
            feature_request_stats=self.request_log.stats(),
            features=self.registry.all(),
            spec=summary,
        )

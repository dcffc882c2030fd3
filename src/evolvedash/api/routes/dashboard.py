"""
Dashboard API routes.

- GET /api/dashboard/data - Everything the frontend loads on start
"""

from fastapi import APIRouter, Depends

from evolvedash.api.deps import get_services
from evolvedash.core.services import DashboardData, Services

router = APIRouter()


@router.get("/dashboard/data", response_model=DashboardData)
def get_dashboard_data(services: Services = Depends(get_services)) -> DashboardData:
    """
    Get the dashboard payload.

    Example response:
        {
          "recentFeatureRequests": [...],
          "featureRequestStats": {"total": 3, "pending": 0, "processing": 0,
                                  "completed": 2, "failed": 1},
          "features": [{"id": "clockpanel", "name": "ClockPanel", ...}],
          "spec": {"featureCount": 3, "workflowCount": 1}
        }
    """
    return services.dashboard.dashboard_data()

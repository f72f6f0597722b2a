"""App service - health aggregation."""
from datetime import datetime, timezone

from ..config import InfrastructureConfig


class AppService:
    """Reports process health plus the infrastructure description."""

    def __init__(self, infrastructure: InfrastructureConfig):
        self.infrastructure = infrastructure

    def get_health(self) -> dict:
        return {
            "status": "ok",
            "message": "WalletHub Core API ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "infrastructure": self.infrastructure.describe(),
        }

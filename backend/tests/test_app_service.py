"""Health aggregation."""
from datetime import datetime

from wallethub.services.app_service import AppService


class FakeInfrastructure:
    def describe(self) -> dict:
        return {"database": {"vendor": "postgresql", "configured": True}}


def test_get_health_passes_through_infrastructure():
    health = AppService(FakeInfrastructure()).get_health()

    assert health["status"] == "ok"
    assert health["message"] == "WalletHub Core API ready"
    assert health["infrastructure"] == {"database": {"vendor": "postgresql", "configured": True}}
    assert datetime.fromisoformat(health["timestamp"]).tzinfo is not None

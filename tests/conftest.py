import base64
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from discovery_intake.core.rate_limit import limiter
from discovery_intake.core.settings import Settings, get_settings
from discovery_intake.dependencies import get_hubspot_client
from discovery_intake.main import app
from discovery_intake.services.hubspot_client import HubSpotResult

TEST_TOKEN = "pat-na1-00000000-test-token-abcd"


def make_photo(payload: bytes = b"\xff\xd8\xff\xe0fake-jpeg") -> str:
    return "data:image/jpeg;base64," + base64.b64encode(payload).decode("ascii")


class FakeHubSpotClient:
    """Neemt alle calls op; antwoorden zijn per test in te stellen."""

    def __init__(self):
        self.create_result = HubSpotResult(status_code=201, data={"id": "501"})
        self.update_result: Optional[HubSpotResult] = None
        self.upload_ids: List[Optional[str]] = []
        self.note_ok = True
        self.create_exc: Optional[Exception] = None

        self.calls: List[tuple] = []

    def calls_named(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    def create_contact(self, properties: Dict[str, str]) -> HubSpotResult:
        self.calls.append(("create_contact", dict(properties)))
        if self.create_exc:
            raise self.create_exc
        return self.create_result

    def update_contact(self, contact_id: str, properties: Dict[str, str]) -> HubSpotResult:
        self.calls.append(("update_contact", contact_id, dict(properties)))
        return self.update_result or HubSpotResult(status_code=200, data={"id": contact_id})

    def upload_file(self, content: bytes, filename: str, content_type: str = "image/jpeg") -> Optional[str]:
        index = len(self.calls_named("upload_file"))
        self.calls.append(("upload_file", filename, content))
        if index < len(self.upload_ids):
            return self.upload_ids[index]
        return f"file-{index + 1}"

    def create_note(self, contact_id: str, file_ids: List[str]) -> bool:
        self.calls.append(("create_note", contact_id, list(file_ids)))
        return self.note_ok


@pytest.fixture
def settings():
    return Settings(HUBSPOT_TOKEN=TEST_TOKEN, _env_file=None)


@pytest.fixture
def hubspot():
    return FakeHubSpotClient()


@pytest.fixture
def client(settings, hubspot):
    """TestClient met nep-HubSpot; geen echte outbound calls."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_hubspot_client] = lambda: hubspot
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


@pytest.fixture
def valid_payload():
    return {
        "contactName": "Flora van Dijk",
        "email": "flora@example.com",
        "phone": "+31612345678",
        "serviceName": "Stichting De Boom",
        "position": "Directeur",
        "serviceType": "bso",
        "studentCount": "50-100",
        "indicativeBudget": "5k-10k",
        "ageGroup": "4-12",
        "phase[]": ["exploring", "preparing-next-budget"],
        "additional-info": "Graag in de ochtend bellen",
    }

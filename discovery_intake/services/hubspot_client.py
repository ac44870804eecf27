# discovery_intake/services/hubspot_client.py
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests
import structlog

from discovery_intake.core.errors import ConfigurationError, UpstreamWriteError
from discovery_intake.core.settings import Settings

logger = structlog.get_logger(__name__)


@dataclass
class HubSpotResult:
    status_code: int
    data: Dict[str, Any] = field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def object_id(self) -> Optional[str]:
        value = self.data.get("id")
        return str(value) if value is not None else None


class HubSpotClient:
    """HubSpot CRM client voor contacts, files en notes."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        if not settings.has_token:
            raise ConfigurationError("HUBSPOT_TOKEN is not configured")

        self.settings = settings
        self.base_url = settings.HUBSPOT_BASE_URL.rstrip("/")
        self.timeout = settings.HUBSPOT_TIMEOUT_SECONDS

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {settings.HUBSPOT_TOKEN}",
                "Accept": "application/json",
            }
        )

    def close(self) -> None:
        self.session.close()

    def _make_request(self, method: str, endpoint: str, **kwargs) -> HubSpotResult:
        """
        Maak een HTTP request naar de HubSpot API.

        Timeouts and transport errors are raised as UpstreamWriteError, the same
        failure class as a non-2xx answer. Status handling is left to the caller.
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            raise UpstreamWriteError(f"HubSpot timeout on {method} {endpoint}: {e}") from e
        except requests.RequestException as e:
            raise UpstreamWriteError(f"HubSpot request failed on {method} {endpoint}: {e}") from e

        text = response.text or ""
        try:
            data = response.json() if text else {}
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"results": data}

        logger.debug("hubspot_response", method=method, endpoint=endpoint, status=response.status_code)
        return HubSpotResult(status_code=response.status_code, data=data, text=text)

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------
    def create_contact(self, properties: Dict[str, str]) -> HubSpotResult:
        return self._make_request(
            "POST", self.settings.HUBSPOT_CONTACTS_PATH, json={"properties": properties}
        )

    def update_contact(self, contact_id: str, properties: Dict[str, str]) -> HubSpotResult:
        endpoint = self.settings.HUBSPOT_CONTACT_PATH.format(contact_id=contact_id)
        return self._make_request("PATCH", endpoint, json={"properties": properties})

    # ------------------------------------------------------------------
    # Files & notes
    # ------------------------------------------------------------------
    def upload_file(self, content: bytes, filename: str, content_type: str = "image/jpeg") -> Optional[str]:
        """
        Upload een bestand naar de HubSpot Files API.

        Returns:
            File ID als string, of None bij fout
        """
        files = {"file": (filename, content, content_type)}
        data = {
            "options": json.dumps({"access": self.settings.HUBSPOT_FILES_ACCESS}),
            "folderPath": self.settings.HUBSPOT_FILES_FOLDER_PATH,
        }
        try:
            result = self._make_request("POST", self.settings.HUBSPOT_FILES_PATH, files=files, data=data)
        except UpstreamWriteError as e:
            logger.error("file_upload_failed", filename=filename, error=str(e))
            return None

        if not result.ok or not result.object_id:
            logger.error(
                "file_upload_failed",
                filename=filename,
                status=result.status_code,
                body=result.text[:500],
            )
            return None

        logger.info("file_uploaded", filename=filename, file_id=result.object_id)
        return result.object_id

    def create_note(self, contact_id: str, file_ids: List[str]) -> bool:
        """Maak een note met bijlagen en koppel die aan het contact."""
        note_data = {
            "properties": {
                "hs_note_body": self.settings.NOTE_BODY,
                "hs_attachment_ids": ";".join(file_ids),
                "hs_timestamp": datetime.now(timezone.utc).isoformat(),
            },
            "associations": [
                {
                    "to": {"id": contact_id},
                    "types": [
                        {
                            "associationCategory": "HUBSPOT_DEFINED",
                            "associationTypeId": self.settings.HUBSPOT_NOTE_ASSOCIATION_TYPE_ID,
                        }
                    ],
                }
            ],
        }
        try:
            result = self._make_request("POST", self.settings.HUBSPOT_NOTES_PATH, json=note_data)
        except UpstreamWriteError as e:
            logger.error("note_create_failed", contact_id=contact_id, error=str(e))
            return False

        if not result.ok:
            logger.error(
                "note_create_failed",
                contact_id=contact_id,
                status=result.status_code,
                body=result.text[:500],
            )
            return False

        logger.info("note_created", contact_id=contact_id, note_id=result.object_id, attachments=len(file_ids))
        return True

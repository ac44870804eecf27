# discovery_intake/services/contact_sync.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import structlog

from discovery_intake.core.errors import ConflictUnresolvedError, UpstreamWriteError
from discovery_intake.infra.retry import DelayedConfirmation
from discovery_intake.services.conflict import parse_existing_contact_id
from discovery_intake.services.hubspot_client import HubSpotClient
from discovery_intake.services.normalize import ContactProperties

logger = structlog.get_logger(__name__)


@dataclass
class ContactResolution:
    contact_id: str
    created: bool
    custom_properties_confirmed: Optional[bool] = None


class ContactSync:
    """Create-or-update van één HubSpot contact per submission."""

    def __init__(self, client: HubSpotClient, confirmation: Optional[DelayedConfirmation] = None):
        self.client = client
        self.confirmation = confirmation or DelayedConfirmation(enabled=False)

    def resolve(self, properties: ContactProperties) -> ContactResolution:
        """
        1. POST create met de volledige property set
        2. 409 -> bestaand id uit de foutmelding halen en PATCH daarop
        3. 2xx -> id uit de response
        4. alles anders -> UpstreamWriteError

        When delayed confirmation is enabled, the create/update only carries the
        basic fields and the custom fields follow in one delayed PATCH.
        """
        delayed = self.confirmation.enabled
        payload = properties.basic if delayed else properties.all()

        result = self.client.create_contact(payload)

        if result.status_code == 409:
            existing_id = parse_existing_contact_id(result.data or result.text)
            if not existing_id:
                logger.error("contact_conflict_unresolved", body=result.text[:500])
                raise ConflictUnresolvedError(
                    "409 without existing contact id", upstream_status=409
                )

            update = self.client.update_contact(existing_id, payload)
            if not update.ok:
                logger.error(
                    "contact_update_failed",
                    contact_id=existing_id,
                    status=update.status_code,
                    body=update.text[:500],
                )
                raise UpstreamWriteError(
                    f"update of contact {existing_id} failed", upstream_status=update.status_code
                )
            logger.info("contact_updated", contact_id=existing_id)
            resolution = ContactResolution(contact_id=existing_id, created=False)

        elif result.ok:
            contact_id = result.object_id
            if not contact_id:
                raise UpstreamWriteError("create response without id", upstream_status=result.status_code)
            logger.info("contact_created", contact_id=contact_id)
            resolution = ContactResolution(contact_id=contact_id, created=True)

        else:
            logger.error(
                "contact_create_failed",
                status=result.status_code,
                body=result.text[:500],
            )
            raise UpstreamWriteError(
                f"create contact failed: {result.status_code}", upstream_status=result.status_code
            )

        if delayed:
            resolution.custom_properties_confirmed = self._confirm_custom_properties(
                resolution.contact_id, properties.custom
            )
        return resolution

    def _confirm_custom_properties(self, contact_id: str, custom: Dict[str, str]) -> bool:
        def _patch():
            result = self.client.update_contact(contact_id, custom)
            if not result.ok:
                raise UpstreamWriteError(
                    f"custom property update failed: {result.status_code}",
                    upstream_status=result.status_code,
                )
            return result

        logger.info("custom_properties_delayed", contact_id=contact_id, delay_s=self.confirmation.delay)
        try:
            self.confirmation.apply(_patch)
        except UpstreamWriteError as e:
            # Contact staat er al; custom velden missen is geen harde fout
            logger.error("custom_properties_update_failed", contact_id=contact_id, error=str(e))
            return False
        logger.info("custom_properties_updated", contact_id=contact_id)
        return True

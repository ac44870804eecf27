# discovery_intake/services/intake_service.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from discovery_intake.core.settings import Settings
from discovery_intake.infra.retry import DelayedConfirmation
from discovery_intake.schemas.discovery_call import DiscoveryCallSubmission
from discovery_intake.services.contact_sync import ContactResolution, ContactSync
from discovery_intake.services.hubspot_client import HubSpotClient
from discovery_intake.services.normalize import build_contact_properties
from discovery_intake.services.photos import PhotoAttachmentResult, PhotoUploader

logger = structlog.get_logger(__name__)


@dataclass
class IntakeOutcome:
    contact: ContactResolution
    photos: PhotoAttachmentResult

    @property
    def contact_id(self) -> str:
        return self.contact.contact_id


class DiscoveryCallService:
    """Service for forwarding a discovery call submission to HubSpot"""

    def __init__(
        self,
        settings: Settings,
        client: HubSpotClient,
        confirmation: Optional[DelayedConfirmation] = None,
    ):
        self.settings = settings
        self.client = client
        self.contacts = ContactSync(
            client,
            confirmation
            or DelayedConfirmation(
                enabled=settings.HUBSPOT_DELAYED_UPDATE_ENABLED,
                delay_seconds=settings.HUBSPOT_DELAYED_UPDATE_SECONDS,
                attempts=settings.HUBSPOT_DELAYED_UPDATE_ATTEMPTS,
            ),
        )
        self.photos = PhotoUploader(client, settings)

    def process(self, submission: DiscoveryCallSubmission) -> IntakeOutcome:
        properties = build_contact_properties(submission, self.settings)
        logger.info(
            "discovery_call_received",
            email_domain=str(submission.email).rpartition("@")[2],
            photos=len(submission.photos),
            planning_stage=properties.custom.get(self.settings.property_name("planning_stage")),
        )

        # Contact fouten zijn fataal; foto fouten niet
        contact = self.contacts.resolve(properties)
        photos = self.photos.attach(contact.contact_id, submission.photos)

        logger.info(
            "discovery_call_processed",
            contact_id=contact.contact_id,
            created=contact.created,
            custom_properties_confirmed=contact.custom_properties_confirmed,
            photos_uploaded=len(photos.file_ids),
            photos_failed=photos.failed,
            photos_skipped=photos.skipped,
            note_created=photos.note_created,
        )
        return IntakeOutcome(contact=contact, photos=photos)

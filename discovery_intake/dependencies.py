from __future__ import annotations

from typing import Iterator

from fastapi import Depends

from discovery_intake.core.logging_config import logger, mask_secret
from discovery_intake.core.errors import ConfigurationError
from discovery_intake.core.settings import Settings, get_settings
from discovery_intake.services.hubspot_client import HubSpotClient
from discovery_intake.services.intake_service import DiscoveryCallService


def get_hubspot_client(settings: Settings = Depends(get_settings)) -> Iterator[HubSpotClient]:
    """
    HubSpot client per request.

    Raises ConfigurationError before any outbound call when the token is missing.
    """
    if not settings.has_token:
        logger.error("hubspot_token_missing", **mask_secret(settings.HUBSPOT_TOKEN))
        raise ConfigurationError("HUBSPOT_TOKEN is not configured")

    logger.debug("hubspot_token_check", **mask_secret(settings.HUBSPOT_TOKEN))
    client = HubSpotClient(settings)
    try:
        yield client
    finally:
        client.close()


def get_discovery_call_service(
    settings: Settings = Depends(get_settings),
    client: HubSpotClient = Depends(get_hubspot_client),
) -> DiscoveryCallService:
    return DiscoveryCallService(settings, client)

# Services package for the discovery call intake

from .hubspot_client import HubSpotClient
from .intake_service import DiscoveryCallService

__all__ = [
    "HubSpotClient",
    "DiscoveryCallService",
]

"""Discovery call intake: website form -> HubSpot contact, photos and note."""

__version__ = "0.1.0"

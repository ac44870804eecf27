# Routers package for the discovery call intake

from . import discovery_call

__all__ = [
    "discovery_call",
]

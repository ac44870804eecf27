# discovery_intake/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from discovery_intake.core.settings import get_settings

# 1 gedeelde Limiter voor de hele app
limiter = Limiter(key_func=get_remote_address)


def intake_limit() -> str:
    return get_settings().RATE_LIMIT_INTAKE

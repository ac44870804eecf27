# discovery_intake/services/normalize.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple, Union

from discovery_intake.core.settings import Settings
from discovery_intake.schemas.discovery_call import DiscoveryCallSubmission

BASIC_PROPERTIES = ("email", "firstname", "lastname", "phone", "company", "jobtitle")


@dataclass
class ContactProperties:
    """Genormaliseerde HubSpot properties, opgesplitst in basis + custom."""

    basic: Dict[str, str] = field(default_factory=dict)
    custom: Dict[str, str] = field(default_factory=dict)

    def all(self) -> Dict[str, str]:
        return {**self.basic, **self.custom}


def split_contact_name(full_name: Optional[str]) -> Tuple[str, str]:
    """'Flora van Dijk' -> ('Flora', 'van Dijk'). No whitespace -> family name ''."""
    parts = (full_name or "").strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def join_planning_stage(value: Union[Iterable[str], str, None]) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return ";".join(str(v) for v in value)


def build_contact_properties(
    submission: DiscoveryCallSubmission, settings: Settings
) -> ContactProperties:
    # Elke key altijd meesturen: een latere update moet een oude waarde kunnen wissen
    firstname, lastname = split_contact_name(submission.contact_name)
    basic = {
        "email": str(submission.email),
        "firstname": firstname,
        "lastname": lastname,
        "phone": submission.phone or "",
        "company": submission.service_name or "",
        "jobtitle": submission.position or "",
    }
    custom = {
        settings.property_name("service_type"): submission.service_type or "",
        settings.property_name("student_count"): submission.student_count or "",
        settings.property_name("budget_range"): submission.indicative_budget or "",
        settings.property_name("age_group"): submission.age_group or "",
        settings.property_name("planning_stage"): join_planning_stage(submission.phase),
        "message": submission.additional_info or "",
        settings.property_name("discovery_call_requested"): "true",
    }
    return ContactProperties(basic=basic, custom=custom)

"""
Sample volunteers and events for development seeding and demos.

Event and availability dates are expressed as day offsets from a base date
so seeded events are always upcoming.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional


VOLUNTEER_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "v1",
        "name": "John Smith",
        "email": "john.smith@example.com",
        "skills": ["First Aid", "Driving", "Cooking"],
        "location": "New York",
        "availability_offsets": [1, 15, 30],
        "max_distance": 30,
        "preferred_event_types": ["Disaster Relief", "Community Service"],
    },
    {
        "id": "v2",
        "name": "Jane Doe",
        "email": "jane.doe@example.com",
        "skills": ["Teaching", "Counseling", "Organization"],
        "location": "Boston",
        "availability_offsets": [5, 10, 20],
        "max_distance": 20,
        "preferred_event_types": ["Education", "Healthcare"],
    },
    {
        "id": "v3",
        "name": "Michael Johnson",
        "email": "michael.j@example.com",
        "skills": ["Construction", "Heavy Lifting", "First Aid"],
        "location": "Chicago",
        "availability_offsets": [3, 17, 25],
        "max_distance": 50,
        "preferred_event_types": ["Disaster Relief", "Construction"],
    },
]


EVENT_TEMPLATES: List[Dict[str, Any]] = [
    {
        "id": "e1",
        "name": "Community Food Drive",
        "description": "Collecting and distributing food to local shelters",
        "date_offset": 15,
        "location": "New York",
        "required_skills": ["Organization", "Cooking", "Driving"],
        "urgency": "Medium",
    },
    {
        "id": "e2",
        "name": "Disaster Response Training",
        "description": "Training session for emergency response volunteers",
        "date_offset": 10,
        "location": "Boston",
        "required_skills": ["First Aid", "Organization", "Teaching"],
        "urgency": "High",
    },
    {
        "id": "e3",
        "name": "School Renovation Project",
        "description": "Repairs and updates to local elementary school",
        "date_offset": 25,
        "location": "Chicago",
        "required_skills": ["Construction", "Heavy Lifting", "Organization"],
        "urgency": "Medium",
    },
]


def _day(base: date, offset: int) -> str:
    return (base + timedelta(days=offset)).isoformat()


def sample_volunteers(base: Optional[date] = None) -> List[Dict[str, Any]]:
    """Volunteer rows ready for ``VolunteerRepository.create``."""
    base = base or date.today()
    rows = []
    for template in VOLUNTEER_TEMPLATES:
        row = {k: v for k, v in template.items() if k != "availability_offsets"}
        row["availability"] = [_day(base, o) for o in template["availability_offsets"]]
        rows.append(row)
    return rows


def sample_events(base: Optional[date] = None) -> List[Dict[str, Any]]:
    """Event rows ready for ``EventRepository.create``."""
    base = base or date.today()
    rows = []
    for template in EVENT_TEMPLATES:
        row = {k: v for k, v in template.items() if k != "date_offset"}
        row["date"] = _day(base, template["date_offset"])
        row["status"] = "Active"
        rows.append(row)
    return rows

"""Shared fixtures for the record search test suite."""

import pytest


@pytest.fixture
def college_records():
    """Small record collection covering every searchable field."""
    return [
        {
            "id": 1,
            "name": "Arjun Institute",
            "city": "Bangalore",
            "state": "Karnataka",
            "course_name": "MBBS",
            "college_type": "MEDICAL",
            "management_type": "PRIVATE",
            "category": "MEDICAL",
            "seats": 150,
            "latitude": 12.98,
            "longitude": 77.60,
        },
        {
            "id": 2,
            "name": "Arjuna College",
            "city": "Chennai",
            "state": "Tamil Nadu",
            "course_name": "BDS",
            "college_type": "DENTAL",
            "management_type": "GOVERNMENT",
            "category": "DENTAL",
            "seats": 60,
            "latitude": 13.08,
            "longitude": 80.27,
        },
        {
            "id": 3,
            "name": "Beta University",
            "city": "Pune",
            "state": "Maharashtra",
            "course_name": "BAMS",
            "college_type": "AYUSH",
            "management_type": "PRIVATE",
            "category": "AYUSH",
            "seats": 40,
        },
    ]

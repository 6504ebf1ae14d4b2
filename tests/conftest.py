"""
Shared fixtures: transport stubs and representative NWPS payloads.
"""

from unittest.mock import Mock

import pytest

from nwps.client import NWPSClient


@pytest.fixture
def mock_client():
    """A client stub whose ``request`` returns whatever the test sets."""
    client = Mock(spec=NWPSClient)
    client.request.return_value = {}
    return client


@pytest.fixture
def gauge_summary_payload():
    return {
        "gauges": [
            {
                "lid": "PTTP1",
                "name": "Monongahela River at Point Marion",
                "latitude": 39.7297,
                "longitude": -79.9139,
                "rfc": {"abbreviation": "OHRFC", "name": "Ohio River Forecast Center"},
                "wfo": {"abbreviation": "PBZ", "name": "Pittsburgh"},
                "state": {"abbreviation": "PA", "name": "Pennsylvania"},
                "pedts": {"observed": "HGIRG", "forecast": "HGIFF"},
                "status": {
                    "observed": {
                        "primary": 12.3,
                        "primaryUnit": "ft",
                        "secondary": 4.5,
                        "secondaryUnit": "kcfs",
                        "floodCategory": "no_flooding",
                        "validTime": "2024-03-01T12:00:00Z",
                    },
                    "forecast": None,
                },
            },
            {
                "lid": "ANAW1",
                "name": "Skagit River near Anacortes",
                "latitude": 48.5,
                "longitude": -122.6,
                "state": None,
            },
        ]
    }


@pytest.fixture
def gauge_detail_payload():
    return {
        "lid": "PTTP1",
        "usgsId": "03072655",
        "reachId": "22338099",
        "name": "Monongahela River at Point Marion",
        "description": "Lock and Dam 8",
        "latitude": 39.7297,
        "longitude": -79.9139,
        "timeZone": "EST5EDT",
        "county": "Fayette",
        "inService": {"enabled": True, "message": ""},
        "forecastReliability": "Medium",
        "rfc": {"abbreviation": "OHRFC", "name": "Ohio River Forecast Center"},
        "wfo": {"abbreviation": "PBZ", "name": "Pittsburgh"},
        "state": {"abbreviation": "PA", "name": "Pennsylvania"},
        "pedts": {"observed": "HGIRG", "forecast": "HGIFF"},
        "status": {
            "observed": {
                "primary": 12.3,
                "primaryUnit": "ft",
                "secondary": 4.5,
                "secondaryUnit": "kcfs",
                "floodCategory": "no_flooding",
                "validTime": "2024-03-01T12:00:00Z",
            },
            "forecast": {
                "primary": -999,
                "primaryUnit": "ft",
                "floodCategory": "fcst_not_current",
                "validTime": "",
            },
        },
        "flood": {
            "stageUnits": "ft",
            "flowUnits": "kcfs",
            "categories": {
                "major": {"stage": 28, "flow": -9999},
                "moderate": {"stage": 25, "flow": -9999},
                "minor": {"stage": 22, "flow": -9999},
                "action": {"stage": 18, "flow": -9999},
            },
            "crests": {
                "historic": [
                    {
                        "occurredTime": "1985-11-06T00:00:00Z",
                        "stage": 39.1,
                        "flow": 0,
                        "preliminary": "false",
                        "olddatum": False,
                    },
                    {
                        "occurredTime": "1954-10-16T00:00:00Z",
                        "stage": 31.4,
                        "olddatum": True,
                    },
                ],
                "recent": [
                    {"occurredTime": "2019-06-02T05:00:00Z", "stage": 24.2},
                ],
            },
            "impacts": [
                {"stage": 30, "statement": "Water reaches the streets of Point Marion."},
                {"stage": 25, "statement": "Low-lying areas near the locks flood."},
                {"stage": 22, "statement": "Minor flooding begins."},
            ],
            "lowWaters": [],
        },
        "datums": {"vertical": "NAVD88", "horizontal": "NAD83", "notes": None},
        "images": {
            "probability": "https://water.noaa.gov/resources/probabilistic/PTTP1.png",
            "hydrograph": {
                "default": "https://water.noaa.gov/resources/hydrographs/pttp1_hg.png",
                "floodcat": "https://water.noaa.gov/resources/hydrographs/pttp1_hg_fc.png",
            },
            "photos": [],
        },
    }


@pytest.fixture
def stageflow_payload():
    return {
        "observed": {
            "pedts": "HGIRG",
            "issuedTime": "2024-03-01T12:05:00Z",
            "wfo": "PBZ",
            "timeZone": "EST5EDT",
            "primaryName": "Stage",
            "primaryUnits": "ft",
            "secondaryName": "Flow",
            "secondaryUnits": "kcfs",
            "data": [
                {
                    "validTime": "2024-03-01T11:00:00Z",
                    "generatedTime": "2024-03-01T11:04:00Z",
                    "primary": 12.1,
                    "secondary": 4.2,
                },
                {
                    "validTime": "2024-03-01T12:00:00Z",
                    "generatedTime": "2024-03-01T12:04:00Z",
                    "primary": 12.3,
                    "secondary": -999,
                },
            ],
        },
        "forecast": {
            "pedts": "HGIFF",
            "issuedTime": "2024-03-01T14:00:00Z",
            "wfo": "PBZ",
            "timeZone": "EST5EDT",
            "primaryName": "Stage",
            "primaryUnits": "ft",
            "secondaryName": "Flow",
            "secondaryUnits": "kcfs",
            "data": [
                {
                    "validTime": "2024-03-02T00:00:00Z",
                    "generatedTime": "2024-03-01T14:00:00Z",
                    "primary": 13.0,
                    "secondary": 5.0,
                },
            ],
        },
    }


@pytest.fixture
def reach_payload():
    return {
        "reachId": "22338099",
        "name": "Monongahela River",
        "latitude": 39.73,
        "longitude": -79.91,
        "streamflow": ["analysis_assimilation", "short_range", "medium_range"],
        "route": {
            "upstream": [
                {"reachId": "22338101", "streamOrder": 7},
                {"reachId": 22338103, "streamOrder": "6"},
            ],
            "downstream": [],
        },
    }


@pytest.fixture
def ensemble_payload():
    def member(reference_time, flows):
        return {
            "referenceTime": reference_time,
            "units": "ft³/s",
            "data": [
                {"validTime": f"2024-03-0{i + 2}T00:00:00Z", "flow": flow}
                for i, flow in enumerate(flows)
            ],
        }

    return {
        "reach": {"reachId": "22338099", "name": "Monongahela River"},
        "mediumRange": {
            "mean": member("2024-03-01T06:00:00Z", [100.0, 110.0, 120.0]),
            "member1": member("2024-03-01T06:00:00Z", [95.0, 105.0]),
            "member3": member("2024-03-01T06:00:00Z", [130.0]),
        },
    }


@pytest.fixture
def monitor_payload():
    return {
        "gauge": {
            "observed": {"major": 2, "moderate": 5, "minor": 11, "action": None},
            "forecast": {"major": 1, "minor": 4},
        },
        "hml": {
            "jobQueue": 3,
            "productCounts": {"lastHour": 120, "last24Hours": 2900},
            "lastHMLReceived": {
                "fromAny": "2024-03-01T12:10:00Z",
                "wfo": {
                    "PBZ": "2024-03-01T12:08:00Z",
                    "CTP": "2024-03-01T11:59:00Z",
                },
            },
        },
        "lro": {"currentLros": 42, "currentInterval": "2024-03"},
    }

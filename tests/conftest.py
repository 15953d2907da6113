"""Pytest configuration and fixtures."""

import os

# Tests hit the upload endpoints far more often than the production limits allow
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from app import create_app
from src.trace_bc.stop_table.tabular_store import TabularStore
from src.trace_bc.trace.infrastructure.services.trace_parser import parse_trace


STOPS_CSV = """id,lon,lat,name
S1,2.29,48.85,Eiffel
S2,2.35,48.86,Louvre
S3,2.33,48.87,Opera
"""

# Layout written by the routing tooling
STOPS_TOOLING = """StopOffset;StopLng;StopLat;Stopname
1;2.2945;48.8584;Tour Eiffel
2;2.3376;48.8606;Louvre
3;2.3319;48.8720;Opera
42;2.3522;48.8566;Hotel de Ville
45;2.3691;48.8530;Bastille
"""

TRACE = """round,0,
stop,S1,A
stop,S2,B
round,1,
stop,S1,C
"""

RAPTOR_OUTPUT = """round,0,
1,2,3,
round,1,
route,43,
route,42,1,2,3,4,5,6,7,8,9,
round,2,
marked_stop,42,
marked_stop,43,45,89,78,
"""


@pytest.fixture
def client():
    """Create a test client for a fresh FastAPI app (empty workspace)."""
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def api_base_url():
    """Base URL for the trace viewer endpoints."""
    return "/api/v1/raptor"


@pytest.fixture
def stops_csv():
    return STOPS_CSV


@pytest.fixture
def stops_tooling():
    return STOPS_TOOLING


@pytest.fixture
def trace_text():
    return TRACE


@pytest.fixture
def raptor_output():
    return RAPTOR_OUTPUT


@pytest.fixture
def store():
    return TabularStore.build(STOPS_CSV)


@pytest.fixture
def trace():
    return parse_trace(TRACE)

import pytest
from fastapi.testclient import TestClient

from fitcalc.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def road_bike():
    return {
        "id": "bike-1",
        "label": "Endurance 56",
        "reach": 380,
        "stack": 560,
        "hta": 73,
        "sta": 73.5,
        "stl": 520,
    }

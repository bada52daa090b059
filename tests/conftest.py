import copy
from pathlib import Path

import pytest

RESOURCES_DIR = Path(__file__).parent / "resources"

MINIMAL_DOCUMENT = {
    "version": "2.0",
    "saasName": "PetClinic",
    "createdAt": "2024-01-15",
    "currency": "USD",
    "hasAnnualPayment": False,
    "features": {
        "pets": {"valueType": "BOOLEAN", "defaultValue": True},
    },
    "plans": {
        "BASIC": {"price": 0, "features": {"pets": {"value": True}}},
    },
}


@pytest.fixture
def resources_dir() -> Path:
    return RESOURCES_DIR


@pytest.fixture
def pricing_dir() -> Path:
    return RESOURCES_DIR / "pricing"


@pytest.fixture
def document():
    return copy.deepcopy(MINIMAL_DOCUMENT)

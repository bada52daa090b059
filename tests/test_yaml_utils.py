import csv
import shutil
import uuid
from datetime import datetime
from pathlib import Path

import pytest
import yaml

from pricing2yaml import errors
from pricing2yaml.errors import MissingVersionError, ValidationError
from pricing2yaml.models import Pricing
from pricing2yaml.version_manager import LATEST_PRICING2YAML_VERSION
from pricing2yaml.yaml_utils import load_document, retrieve_pricing_from_path, retrieve_pricing_from_yaml

RESOURCES_DIR = Path(__file__).parent / "resources"

DEMO_SAAS_NAME = "PetClinic"


def load_negative_cases():
    """Read the negative parsing table; rows whose path is '-' open a new section."""
    with open(RESOURCES_DIR / "negative-parsing-tests.csv", newline="", encoding="utf-8") as file_handle:
        rows = list(csv.DictReader(file_handle))

    cases = []
    section = None
    for row in rows:
        if row["pricingPath"] == "-":
            section = row["testName"]
            continue
        cases.append(pytest.param(
            row["pricingPath"], row["expectedError"], row["expectedMessage"],
            id=f"{section} - {row['testName']}",
        ))
    return cases


def assert_full_pricing(pricing: Pricing):
    assert pricing.saas_name == DEMO_SAAS_NAME
    assert pricing.version == LATEST_PRICING2YAML_VERSION
    assert isinstance(pricing.created_at, datetime)
    assert pricing.currency
    assert isinstance(pricing.has_annual_payment, bool)
    assert len(pricing.features) > 0
    assert len(pricing.usage_limits) > 0
    assert len(pricing.plans) > 0
    assert len(pricing.add_ons) > 0
    assert any(add_on.depends_on for add_on in pricing.add_ons)
    assert all(len(plan.features) == len(pricing.features) for plan in pricing.plans)
    assert all(len(plan.usage_limits) == len(pricing.usage_limits) for plan in pricing.plans)


@pytest.fixture
def temp_pricing_path(tmp_path, pricing_dir):
    """Copy the demo pricing to a temporary file, as callers usually pass their own files."""
    path = tmp_path / f"test_{uuid.uuid4()}_petclinic.yml"
    shutil.copyfile(pricing_dir / "petclinic.yml", path)
    return path


def test_parses_demo_saas_from_path(temp_pricing_path):
    assert_full_pricing(retrieve_pricing_from_path(temp_pricing_path))


def test_parses_demo_saas_from_yaml(temp_pricing_path):
    assert_full_pricing(retrieve_pricing_from_yaml(temp_pricing_path.read_text(encoding="utf-8")))


def test_parses_relative_paths(pricing_dir, monkeypatch):
    monkeypatch.chdir(pricing_dir)

    assert retrieve_pricing_from_path("petclinic.yml").saas_name == DEMO_SAAS_NAME


def test_demo_saas_details(pricing_dir):
    pricing = retrieve_pricing_from_path(pricing_dir / "petclinic.yml")

    assert pricing.created_at == datetime(2024, 1, 15)
    assert pricing.tags == ["Management", "Medical"]
    assert [plan.name for plan in pricing.plans] == ["BASIC", "GOLD", "PLATINUM"]
    assert pricing.plans[2].usage_limits["maxVisitsPerMonth"] == float("inf")
    hotel = pricing.add_ons[2]
    assert hotel.name == "petsHotel"
    assert hotel.available_for == ["BASIC", "GOLD", "PLATINUM"]
    assert hotel.excludes == ["smartClinicReports"]


@pytest.mark.parametrize("filename", ["petclinic-v1.0.yml", "petclinic-v1.1.yml"])
def test_older_versions_are_updated(pricing_dir, filename):
    pricing = retrieve_pricing_from_path(pricing_dir / filename)

    assert pricing.version == LATEST_PRICING2YAML_VERSION
    assert pricing.created_at == datetime(2024, 1, 15)
    assert pricing.plans[1].price == 5.0
    assert pricing.plans[1].annual_price == 50.0
    assert pricing.plans[0].features == {"pets": True, "visits": False}
    assert pricing.usage_limits[0].linked_features == ["pets"]
    assert pricing.add_ons[0].available_for == ["BASIC"]
    assert pricing.add_ons[0].usage_limits_extensions == {"maxPets": 2}
    assert pricing.add_ons[1].depends_on == ["extraPets"]


def test_every_version_yields_the_same_pricing(pricing_dir):
    v10 = retrieve_pricing_from_path(pricing_dir / "petclinic-v1.0.yml")
    v11 = retrieve_pricing_from_path(pricing_dir / "petclinic-v1.1.yml")

    assert v10 == v11


def test_single_feature_document_migrates_from_1_0():
    pricing = retrieve_pricing_from_yaml(
        """
version: "1.0"
saasName: Minimal
day: 1
month: 2
year: 2023
currency: EUR
hasAnnualPayment: false
features:
  pets:
    valueType: BOOLEAN
    defaultValue: true
plans:
  BASIC:
    monthlyPrice: 0
    features:
      pets: true
"""
    )

    assert pricing.version == "2.0"
    assert [feature.name for feature in pricing.features] == ["pets"]
    assert len(pricing.plans) == 1
    assert set(pricing.plans[0].features) == {"pets"}
    assert pricing.plans[0].price == 0
    assert pricing.usage_limits == []
    assert pricing.add_ons == []


def test_unquoted_version_numbers_are_accepted(pricing_dir):
    text = (pricing_dir / "petclinic.yml").read_text(encoding="utf-8").replace('version: "2.0"', "version: 2.0")

    assert retrieve_pricing_from_yaml(text).version == "2.0"


def test_add_ons_may_relate_in_opposite_directions(document):
    document["addOns"] = {
        "petsHotel": {"dependsOn": ["extraPets"]},
        "extraPets": {"excludes": ["petsHotel"]},
    }

    pricing = retrieve_pricing_from_yaml(yaml.safe_dump(document, sort_keys=False))

    assert pricing.add_ons[0].depends_on == ["extraPets"]
    assert pricing.add_ons[1].excludes == ["petsHotel"]


def test_missing_version_fails_before_anything_else():
    with pytest.raises(MissingVersionError):
        retrieve_pricing_from_yaml("saasName: 3\nfeatures: nope\nplans: []\n")


def test_empty_document_has_no_version():
    with pytest.raises(MissingVersionError):
        retrieve_pricing_from_yaml("")


def test_duplicate_keys_are_rejected():
    with pytest.raises(yaml.YAMLError, match="duplicate key 'pets'"):
        load_document("features:\n  pets: 1\n  pets: 2\n")


def test_merge_keys_are_still_supported():
    document = load_document("base: &base\n  value: 1\nplan:\n  <<: *base\n  value: 2\n")

    assert document["plan"] == {"value": 2}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        retrieve_pricing_from_path(tmp_path / "missing.yml")


@pytest.mark.parametrize("pricing_path, expected_error, expected_message", load_negative_cases())
def test_negative_parsing(pricing_path, expected_error, expected_message):
    error_class = getattr(errors, expected_error)

    with pytest.raises(error_class) as exc_info:
        retrieve_pricing_from_path(RESOURCES_DIR / pricing_path)

    assert expected_message in str(exc_info.value)


def test_validation_errors_propagate_unwrapped(pricing_dir):
    with pytest.raises(ValidationError) as exc_info:
        retrieve_pricing_from_path(pricing_dir / "negative" / "plan-missing-usage-limit.yml")

    assert exc_info.value.entity == "GOLD"
    assert exc_info.value.__cause__ is None


def test_text_features_may_be_valued_infinity(document):
    document["features"]["support"] = {"valueType": "TEXT", "defaultValue": "Email"}
    document["plans"]["BASIC"]["features"]["support"] = {"value": "Infinity"}

    pricing = retrieve_pricing_from_yaml(yaml.safe_dump(document, sort_keys=False))

    assert pricing.plans[0].features["support"] == "Infinity"


def test_parsing_writes_nothing_to_stdout(pricing_dir, capsys):
    retrieve_pricing_from_path(pricing_dir / "petclinic-v1.0.yml")

    assert capsys.readouterr().out == ""

import inspect

from fastapi.testclient import TestClient

from pricing2yaml.api import main
from pricing2yaml.api.main import app

client = TestClient(app)


def test_health():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "UP"}


def test_parse_uploaded_pricing(pricing_dir):
    content = (pricing_dir / "petclinic.yml").read_bytes()
    files = {"file": ("petclinic.yml", content, "application/yaml")}

    response = client.post("/pricing/parse", files=files)

    assert response.status_code == 200
    body = response.json()
    assert body["saasName"] == "PetClinic"
    assert body["version"] == "2.0"
    assert body["createdAt"] == "2024-01-15T00:00:00"
    assert [plan["name"] for plan in body["plans"]] == ["BASIC", "GOLD", "PLATINUM"]
    assert body["plans"][2]["usageLimits"]["maxVisitsPerMonth"] == "Infinity"
    assert body["addOns"][1]["dependsOn"] == ["extraPets"]


def test_parse_uploaded_legacy_pricing(pricing_dir):
    content = (pricing_dir / "petclinic-v1.0.yml").read_bytes()
    files = {"file": ("petclinic-v1.0.yml", content, "application/x-yaml")}

    response = client.post("/pricing/parse", files=files)

    assert response.status_code == 200
    assert response.json()["version"] == "2.0"


def test_reject_non_yaml_files():
    files = {"file": ("not_yaml.txt", "This is not yaml", "text/plain")}

    response = client.post("/pricing/parse", files=files)

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Invalid Content-Type: text/plain. Only application/yaml is supported"
    }


def test_reject_oversized_files(monkeypatch, pricing_dir):
    monkeypatch.setattr(main.settings, "max_document_bytes", 16)
    content = (pricing_dir / "petclinic.yml").read_bytes()
    files = {"file": ("petclinic.yml", content, "application/yaml")}

    response = client.post("/pricing/parse", files=files)

    assert response.status_code == 413


def test_parse_text_reports_error_kind(pricing_dir):
    content = (pricing_dir / "negative" / "unknown-depends-on.yml").read_text(encoding="utf-8")

    response = client.post("/pricing/parse/text", json={"content": content})

    assert response.status_code == 422
    assert response.json()["detail"] == {
        "kind": "ValidationError",
        "message": "Add-on 'petsHotel' depends on unknown add-on 'laundry'",
    }


def test_parse_text_without_version():
    response = client.post("/pricing/parse/text", json={"content": "saasName: PetClinic\n"})

    assert response.status_code == 422
    assert response.json()["detail"]["kind"] == "MissingVersionError"


def test_parse_text_with_broken_yaml():
    response = client.post("/pricing/parse/text", json={"content": "features: [pets\n"})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid YAML")


def test_parse_text_requires_content():
    response = client.post("/pricing/parse/text", json={"content": ""})

    assert response.status_code == 422


def test_uploads_are_parsed_in_the_threadpool(monkeypatch, pricing_dir):
    parsed = []

    async def run_inline(function, *args):
        parsed.append(function)
        return function(*args)

    monkeypatch.setattr(main, "run_in_threadpool", run_inline)
    files = {"file": ("petclinic.yml", (pricing_dir / "petclinic.yml").read_bytes(), "application/yaml")}

    response = client.post("/pricing/parse", files=files)

    assert response.status_code == 200
    assert parsed == [main.parse_document]


def test_text_endpoint_is_synchronous():
    assert not inspect.iscoroutinefunction(main.parse_pricing_text)

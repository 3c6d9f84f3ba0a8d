# tests/test_api.py

import base64

import fitz
import pytest
from fastapi.testclient import TestClient

import app as server
from fleetscore import config

REPORT_LINES = [
    "Vessel Name: ASIAN VISION",
    "Inspection Date: 29 Jul 2025",
    "Inspector: Byeongil (James) Jang",
    "Hull coating in good condition, external hull recently washed",
    "Deficiency: stern ramp hydraulic hose leaking at the coupling",
    "Observation: forward mooring winches operational and well greased",
    "Remarks: galley clean and tidy, food preparation areas in order",
]


def _pdf_bytes(lines):
    doc = fitz.open()
    page = doc.new_page()
    for n, line in enumerate(lines):
        page.insert_text((40, 60 + 18 * n), line, fontsize=10)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "AUTHORIZED_USERS", {})
    monkeypatch.setattr(config, "OCR_ENABLED", False)
    return TestClient(server.app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["standards"]["categories"] == 4
    assert body["authenticated_user"] == "anonymous"


def test_standards_listing(client):
    body = client.get("/standards").json()
    assert list(body["standards"]) == ["deck", "cargo", "technical", "accommodation"]
    assert "Hull Coating" in body["standards"]["deck"]["subcategories"]["Hull and Structure"]["items"]


def test_analyze_text(client):
    resp = client.post("/analyze/text", json={"text": "\n".join(REPORT_LINES)})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["extracted_data"]["vessel_name"] == "ASIAN VISION"
    assert data["extracted_data"]["inspector"] == "Byeongil (James) Jang"
    assert set(data["analysis"]) == {"deck", "cargo", "technical", "accommodation"}
    assert 1.0 <= data["overall_score"] <= 4.0
    assert body["document_info"]["source"] == "text"


def test_analyze_text_without_stats(client):
    resp = client.post("/analyze/text", params={"include_text_stats": False}, json={"text": ""})
    assert resp.status_code == 200
    body = resp.json()
    assert body["document_info"] is None
    assert body["data"]["overall_score"] == 2.0
    assert body["data"]["overall_status"] == "Satisfactory"


def test_analyze_pdf(client):
    files = {"file": ("report.pdf", _pdf_bytes(REPORT_LINES), "application/pdf")}
    resp = client.post("/analyze", files=files)
    assert resp.status_code == 200
    body = resp.json()
    assert body["document_info"]["filename"] == "report.pdf"
    assert body["document_info"]["source"] == "pdf_text"
    assert body["document_info"]["pages"] == 1
    assert body["data"]["extracted_data"]["vessel_name"] == "ASIAN VISION"


def test_analyze_rejects_non_pdf(client):
    resp = client.post("/analyze", files={"file": ("report.txt", b"hello", "text/plain")})
    assert resp.status_code == 415


def test_analyze_rejects_empty_upload(client):
    resp = client.post("/analyze", files={"file": ("report.pdf", b"", "application/pdf")})
    assert resp.status_code == 400


def test_basic_auth(client, monkeypatch):
    monkeypatch.setattr(server, "AUTHORIZED_USERS", {"surveyor": "s3cret"})

    resp = client.get("/health")
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"].startswith("Basic")

    assert client.get("/health", auth=("surveyor", "wrong")).status_code == 401

    token = base64.b64encode(b"no-colon").decode()
    assert client.get("/health", headers={"Authorization": f"Basic {token}"}).status_code == 401

    resp = client.get("/", auth=("surveyor", "s3cret"))
    assert resp.status_code == 200
    assert resp.json()["authenticated_user"] == "surveyor"


def test_parse_auth_users():
    assert config.parse_auth_users(" alice, bob ,,", "pw") == {"alice": "pw", "bob": "pw"}
    assert config.parse_auth_users("alice", "") == {}

import importlib
import io
import json
import logging
import zipfile

import pytest

import ai_processor
import app as app_module
from exceptions import ProviderRateLimitError, ProviderTimeoutError, ProviderAuthError


@pytest.fixture
def client():
    app_module.app.config["TESTING"] = True
    return app_module.app.test_client()


def test_ping(client):
    response = client.get("/ping")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_app_configures_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    importlib.reload(app_module)
    assert calls == [{"level": getattr(logging, app_module.LOG_LEVEL.upper(), logging.INFO)}]


def test_analyze_returns_validated_analysis(client, fake_llm, valid_analysis):
    fake_llm.reply = json.dumps(valid_analysis)
    response = client.post("/analyze-contract", json={"contractText": "A contract.", "contractId": "c-9"})
    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["contractId"] == "c-9"
    assert body["analysis"] == valid_analysis
    assert "fallback" not in body


def test_analyze_falls_back_with_200(client, fake_llm):
    fake_llm.reply = "I cannot process this."
    response = client.post("/analyze-contract", json={"contractText": "A contract.", "contractId": "c-9"})
    body = response.get_json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["fallback"] is True
    assert body["analysis"]["overallRiskLevel"] == "Medium Risk"


@pytest.mark.parametrize("payload", [{}, {"contractText": ""}, {"contractText": 42}])
def test_analyze_requires_contract_text(client, payload):
    response = client.post("/analyze-contract", json=payload)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Contract text is required"}


def test_analyze_rejects_overlong_text(client):
    response = client.post("/analyze-contract", json={"contractText": "x" * 100001})
    assert response.status_code == 400
    assert response.get_json() == {"error": "Contract text too long (max 100,000 characters)"}


def test_analyze_accepts_maximum_length(client, fake_llm):
    fake_llm.reply = "nothing"
    response = client.post("/analyze-contract", json={"contractText": "x" * 100000})
    assert response.status_code == 200


def test_analyze_without_api_key(client, monkeypatch):
    monkeypatch.setattr(ai_processor, "OPENAI_API_KEY", "")
    response = client.post("/analyze-contract", json={"contractText": "A contract."})
    assert response.status_code == 500
    assert response.get_json() == {"error": "Server configuration error"}


@pytest.mark.parametrize("error, status", [
    (ProviderAuthError("401"), 401),
    (ProviderRateLimitError("429"), 429),
    (ProviderTimeoutError("timed out"), 408),
])
def test_analyze_maps_provider_errors(client, monkeypatch, error, status):
    def raise_error(contract_text, contract_id=None):
        raise error

    monkeypatch.setattr(app_module, "analyze_contract", raise_error)
    response = client.post("/analyze-contract", json={"contractText": "A contract."})
    assert response.status_code == status
    assert response.get_json() == {"error": error.public_message}


def test_analyze_unexpected_error_falls_back(client, monkeypatch):
    def raise_error(contract_text, contract_id=None):
        raise KeyError("boom")

    monkeypatch.setattr(app_module, "analyze_contract", raise_error)
    response = client.post("/analyze-contract", json={"contractText": "A contract."})
    assert response.status_code == 200
    assert response.get_json()["fallback"] is True


def test_analyze_rejects_get(client):
    assert client.get("/analyze-contract").status_code == 405


def test_analyze_preflight(client):
    response = client.options("/analyze-contract")
    assert response.status_code == 200


def test_extract_text(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))
    seen = []

    def fake_extract(filepath):
        seen.append(filepath)
        return "This Service Agreement is entered into between Company A and Company B."

    monkeypatch.setattr(app_module, "extract_document_text", fake_extract)
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"%PDF-1.4"), "../My Contract.pdf")},
        content_type="multipart/form-data",
    )
    body = response.get_json()
    assert response.status_code == 200
    assert body["fileName"] == "My_Contract.pdf"
    assert body["wordCount"] == 12
    assert seen == [str(tmp_path / "My_Contract.pdf")]
    assert not list(tmp_path.iterdir())


def test_extract_text_rejects_unsupported_type(client):
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"text"), "contract.txt")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json() == {"error": "Unsupported file type. Please upload a PDF or DOCX file."}


def test_extract_text_requires_file(client):
    response = client.post("/extract-text", data={}, content_type="multipart/form-data")
    assert response.status_code == 400


def test_extract_text_without_text(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))
    monkeypatch.setattr(app_module, "extract_document_text", lambda filepath: "  ")
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"%PDF-1.4"), "scan.pdf")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert "OCR" in response.get_json()["error"]


def test_extract_text_rejects_oversized_upload(client, monkeypatch):
    monkeypatch.setitem(app_module.app.config, "MAX_CONTENT_LENGTH", 1024)
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"%PDF-1.4" + b"0" * 4096), "big.pdf")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 413


def test_extract_text_from_docx(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))
    seen = []

    def fake_extract(filepath):
        seen.append(filepath)
        return "CONFIDENTIALITY: Both parties agree to maintain confidentiality."

    monkeypatch.setattr(app_module, "extract_document_text", fake_extract)
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"PK\x03\x04docx"), "nda.docx")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    assert response.get_json()["fileName"] == "nda.docx"
    assert seen == [str(tmp_path / "nda.docx")]


def test_extract_text_rejects_corrupt_docx(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))

    def fake_extract(filepath):
        raise zipfile.BadZipFile("File is not a zip file")

    monkeypatch.setattr(app_module, "extract_document_text", fake_extract)
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"not a zip"), "broken.docx")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert "corrupted or password protected" in response.get_json()["error"]
    assert not list(tmp_path.iterdir())


def test_extract_text_rejects_empty_docx(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b""), "empty.docx")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json() == {"error": "DOCX file appears to be empty"}


def test_extract_text_docx_without_text(client, monkeypatch, tmp_path):
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(tmp_path))
    monkeypatch.setattr(app_module, "extract_document_text", lambda filepath: "")
    response = client.post(
        "/extract-text",
        data={"file": (io.BytesIO(b"PK"), "images.docx")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert "DOCX document" in response.get_json()["error"]


def test_chat(client, fake_llm):
    fake_llm.reply = "Thirty days."
    response = client.post("/chat", json={
        "messages": [{"role": "user", "content": "Notice period?"}],
        "contractText": "Terminate with 30 days notice.",
    })
    assert response.status_code == 200
    assert response.get_json() == {"response": "Thirty days."}


@pytest.mark.parametrize("payload", [
    {},
    {"messages": []},
    {"messages": ["hello"]},
    {"messages": [{"role": "user", "content": "hi"}], "contractText": 5},
    {"messages": [{"role": "robot", "content": "hi"}]},
])
def test_chat_rejects_bad_body(client, fake_llm, payload):
    assert client.post("/chat", json=payload).status_code == 400


def test_chat_maps_rate_limit(client, fake_llm):
    fake_llm.error = RuntimeError("rate limit exceeded")
    response = client.post("/chat", json={"messages": [{"role": "user", "content": "hi"}]})
    assert response.status_code == 429

"""
Tests for the Docket HTTP API.

Each test starts from an empty workspace and the default settings.
"""

from __future__ import annotations

import copy
import io

import pytest
from docx import Document
from fastapi.testclient import TestClient

from docket.core.document import Workspace
from docket.server import _state, app

OUTLINE_HTML = (
    "<p>Title</p>"
    "<ol><li>Scope<ol><li>Purpose</li><li>Terms</li></ol></li><li>Price</li></ol>"
)


@pytest.fixture(autouse=True)
def reset_state():
    settings = copy.deepcopy(_state["settings"])
    _state["workspace"] = Workspace()
    yield
    _state["workspace"] = Workspace()
    _state["settings"] = settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _upload(client: TestClient, html: str, name: str = "doc.html", role: str = "primary"):
    return client.post(
        f"/api/documents/{role}",
        files={"file": (name, html.encode("utf-8"), "text/html")},
    )


# ===================================================================
# Documents
# ===================================================================


class TestDocuments:
    """Tests for uploading and reading documents."""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_no_document_loaded(self, client):
        assert client.get("/api/documents/primary").status_code == 404
        assert client.get("/api/numbering/check").status_code == 404

    def test_upload_html(self, client):
        response = _upload(client, OUTLINE_HTML)
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "doc.html"
        assert data["loader"] == "html"
        assert data["paragraphs"] == ["Title", "1 Scope", "1.1 Purpose", "1.2 Terms", "2 Price"]

        primary = client.get("/api/documents/primary").json()
        assert primary["paragraph_count"] == 5
        assert primary["is_modified"] is False

    def test_upload_docx(self, client, make_docx):
        raw = make_docx([("Intro", None), ("First", "List Number")]).read_bytes()
        response = client.post(
            "/api/documents/primary",
            files={"file": ("contract.docx", raw, "application/octet-stream")},
        )
        assert response.status_code == 200
        assert response.json()["paragraphs"] == ["Intro", "1 First"]

    def test_unsupported_extension(self, client):
        response = _upload(client, "<p>x</p>", name="scan.pdf")
        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "INPUT_002"

    def test_empty_upload(self, client):
        response = _upload(client, "", name="empty.html")
        assert response.status_code == 400
        assert "empty" in response.json()["detail"]["message"]

    def test_corrupt_docx(self, client):
        response = client.post(
            "/api/documents/primary",
            files={"file": ("bad.docx", b"not a docx", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "LOAD_001"

    def test_new_primary_discards_edits(self, client):
        _upload(client, "<p>a</p>")
        client.put("/api/paragraphs/1", json={"text": "changed"})
        _upload(client, "<p>fresh</p>")
        primary = client.get("/api/documents/primary").json()
        assert primary["paragraphs"] == ["fresh"]
        assert primary["is_modified"] is False

    def test_loaders(self, client):
        assert ".docx" in client.get("/api/loaders").json()["extensions"]


# ===================================================================
# Paragraphs
# ===================================================================


class TestParagraphs:
    """Tests for extraction, normalization, editing and search."""

    def test_extract_from_html(self, client):
        response = client.post("/api/paragraphs/extract", json={"html": OUTLINE_HTML})
        assert response.status_code == 200
        assert response.json()["paragraph_count"] == 5

    def test_normalize(self, client):
        _upload(client, "<p>a</p><p>b</p>")
        data = client.post("/api/paragraphs/normalize").json()
        assert data["paragraphs"] == ["a", "b"]
        assert data["total_input"] == 2

    def test_edit_paragraph(self, client):
        _upload(client, OUTLINE_HTML)
        response = client.put("/api/paragraphs/2", json={"text": "  1 Object \n"})
        assert response.status_code == 200
        assert response.json()["paragraph"] == "1 Object"

        primary = client.get("/api/documents/primary").json()
        assert primary["paragraphs"][1] == "1 Object"
        assert primary["is_modified"] is True

    @pytest.mark.parametrize("number", [0, 6])
    def test_edit_out_of_range(self, client, number):
        _upload(client, OUTLINE_HTML)
        response = client.put(f"/api/paragraphs/{number}", json={"text": "x"})
        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "INPUT_002"

    def test_search(self, client):
        _upload(client, OUTLINE_HTML)
        data = client.get("/api/paragraphs/search", params={"item": "1.2"}).json()
        assert data["found"] is True
        assert data["index"] == 3
        assert data["number"] == 4
        assert data["paragraph"] == "1.2 Terms"

    def test_search_not_found(self, client):
        _upload(client, OUTLINE_HTML)
        data = client.get("/api/paragraphs/search", params={"item": "9"}).json()
        assert data["found"] is False
        assert data["number"] is None


# ===================================================================
# Numbering
# ===================================================================


class TestNumbering:
    """Tests for the numbering endpoints."""

    def test_check(self, client):
        _upload(client, "<p>1. a</p><p>3. b</p><p>4. c</p>")
        data = client.get("/api/numbering/check").json()
        assert data["ok"] is False
        assert data["issues"] == [{"index": 1, "found": 3, "expected": 2, "text": "3. b"}]

    def test_renumber_updates_working_copy(self, client):
        _upload(client, "<p>6.1 a</p><p>6.5 b</p>")
        data = client.post("/api/numbering/renumber").json()
        assert data["paragraphs"] == ["6.1 a", "6.2 b"]
        assert data["changed_indices"] == [1]

        primary = client.get("/api/documents/primary").json()
        assert primary["paragraphs"] == ["6.1 a", "6.2 b"]
        assert primary["is_modified"] is True

    def test_scheme(self, client):
        _upload(client, OUTLINE_HTML)
        data = client.get("/api/numbering/scheme").json()
        assert data["scheme_type"] == "hierarchical"
        assert data["max_depth"] == 2


# ===================================================================
# Comparison and export
# ===================================================================


class TestCompareAndExport:
    """Tests for comparison and download."""

    def test_compare_requires_both_documents(self, client):
        _upload(client, "<p>a</p>")
        assert client.post("/api/compare").status_code == 400

    def test_compare(self, client):
        _upload(client, "<p>A</p><p>b</p>", name="ref.html", role="reference")
        _upload(client, "<p>a</p><p>c</p>")
        data = client.post("/api/compare").json()
        assert data["missing_in_target"] == ["b"]
        assert data["extra_in_target"] == ["c"]

    def test_compare_uses_working_copy(self, client):
        _upload(client, "<p>x</p>", name="ref.html", role="reference")
        _upload(client, "<p>y</p>")
        client.put("/api/paragraphs/1", json={"text": "X"})
        assert client.post("/api/compare").json()["identical"] is True

    def test_export_formats(self, client):
        data = client.get("/api/export/formats").json()
        assert "docx" in data["formats"]
        assert data["default"] == "docx"

    def test_export_docx(self, client):
        _upload(client, OUTLINE_HTML, name="contract.html")
        response = client.get("/api/export/docx")
        assert response.status_code == 200
        assert "contract-normalized.docx" in response.headers["content-disposition"]
        doc = Document(io.BytesIO(response.content))
        assert [p.text for p in doc.paragraphs][:2] == ["Title", "1 Scope"]

    def test_export_html(self, client):
        _upload(client, "<p>a &amp; b</p>")
        response = client.get("/api/export/html")
        assert response.status_code == 200
        assert "a &amp; b" in response.text

    def test_export_unknown_format(self, client):
        _upload(client, "<p>a</p>")
        assert client.get("/api/export/pdf").status_code == 400

    def test_export_without_document(self, client):
        assert client.get("/api/export/docx").status_code == 404


# ===================================================================
# Settings
# ===================================================================


class TestSettings:
    def test_update_settings(self, client):
        assert client.post("/api/settings", json={"export_title": "Contract"}).json() == {
            "saved": True
        }
        settings = client.get("/api/settings").json()
        assert settings["export_title"] == "Contract"
        assert settings["default_export_format"] == "docx"

    def test_special_chars_setting_used_by_normalize(self, client):
        client.post("/api/settings", json={"replace_special_chars": True})
        _upload(client, "<p>it’s</p>")
        data = client.post("/api/paragraphs/normalize").json()
        assert data["paragraphs"] == ["it's"]

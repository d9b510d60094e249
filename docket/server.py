"""FastAPI server for Docket.

Exposes the paragraph workbench over HTTP: upload a primary document and
a reference, normalize and edit the primary's paragraphs, check or repair
their numbering, compare the two documents, and download the result.
Endpoints are registered on an ``APIRouter`` so a larger application can
mount them; the standalone ``app`` includes the router directly::

    uvicorn docket.server:app --reload --port 8430
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, FastAPI, File, HTTPException, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from docket.cleaning import ParagraphNormalizer, normalize_paragraphs
from docket.comparison import compare_paragraph_sets
from docket.core.document import ParsedDocument, Workspace
from docket.exporters import ExporterRegistry
from docket.hardening import (
    ErrorFormatter,
    InputValidator,
    RetriesExhaustedError,
    RetryConfig,
    ValidationError,
    retry_with_backoff,
)
from docket.loaders import LoaderError, LoaderRegistry
from docket.markup import extract_paragraphs, parse_html
from docket.numbering import (
    NumberingScheme,
    check_numbering,
    find_paragraph_by_item_number,
    renumber_hierarchical,
)

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

router = APIRouter()

app = FastAPI(
    title="Docket API",
    description="Paragraph extraction, numbering repair and comparison for Word documents",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# In-memory state: one workspace per server process
_state: dict[str, Any] = {
    "workspace": Workspace(),
    "settings": {
        "replace_special_chars": False,
        "default_export_format": "docx",
        "export_title": "Normalized Document",
        "max_upload_mb": 25,
        "load_retry_attempts": 2,
    },
}

_validator = InputValidator()
_formatter = ErrorFormatter()


# ============================================================================
# Pydantic Models for API
# ============================================================================


class ExtractRequest(BaseModel):
    """Request model for extracting paragraphs from converter HTML."""

    html: str
    normalize: bool = True


class ParagraphEditRequest(BaseModel):
    """Request model for replacing a paragraph's text."""

    text: str


# ============================================================================
# Helpers
# ============================================================================


def _get_workspace() -> Workspace:
    return _state["workspace"]


def _require_document() -> Workspace:
    workspace = _get_workspace()
    if not workspace.has_document:
        raise HTTPException(status_code=404, detail="No document loaded")
    return workspace


async def _load_upload(file: UploadFile) -> ParsedDocument:
    """Validate an uploaded file and read its paragraphs."""
    settings = _state["settings"]
    content = await file.read()

    try:
        filename = _validator.validate_upload_filename(
            file.filename,
            allowed_extensions=LoaderRegistry.supported_extensions(),
        )
        _validator.validate_upload_size(len(content), max_mb=settings["max_upload_mb"])
    except ValidationError as e:
        raise HTTPException(
            status_code=400, detail=_formatter.format_validation_error(e).to_dict()
        )

    retry = RetryConfig(
        max_attempts=max(1, int(settings["load_retry_attempts"])),
        base_delay=0.1,
    )
    try:
        return retry_with_backoff(LoaderRegistry.load_document, retry, content, filename)
    except (LoaderError, RetriesExhaustedError) as e:
        logger.warning("Failed to load %s: %s", filename, e)
        raise HTTPException(
            status_code=400, detail=_formatter.format_load_error(e).to_dict()
        )


# ============================================================================
# Document Endpoints
# ============================================================================


@router.post("/api/documents/primary")
async def upload_primary(file: UploadFile = File(...)) -> dict[str, Any]:
    """Upload the document to work on. Replaces any earlier one."""
    document = await _load_upload(file)
    workspace = _get_workspace()
    workspace.load_primary(document)
    logger.info(
        "Primary document %s loaded (%d paragraphs)",
        document.source_name,
        len(document.paragraphs),
    )
    return {
        "name": document.source_name,
        "paragraph_count": len(document.paragraphs),
        "paragraphs": document.paragraphs,
        "loader": document.loader_used,
    }


@router.post("/api/documents/reference")
async def upload_reference(file: UploadFile = File(...)) -> dict[str, Any]:
    """Upload the reference document used for comparison."""
    document = await _load_upload(file)
    _get_workspace().load_reference(document)
    logger.info("Reference document %s loaded", document.source_name)
    return {
        "name": document.source_name,
        "paragraph_count": len(document.paragraphs),
    }


@router.get("/api/documents/primary")
async def get_primary() -> dict[str, Any]:
    """Get the working copy of the primary document."""
    return _require_document().to_dict()


# ============================================================================
# Paragraph Endpoints
# ============================================================================


@router.post("/api/paragraphs/extract")
async def extract_from_html(request: ExtractRequest) -> dict[str, Any]:
    """Extract paragraphs from HTML produced by an external converter."""
    paragraphs = extract_paragraphs(parse_html(request.html))
    if request.normalize:
        paragraphs = normalize_paragraphs(paragraphs)
    return {
        "paragraph_count": len(paragraphs),
        "paragraphs": paragraphs,
    }


@router.post("/api/paragraphs/normalize")
async def normalize_document() -> dict[str, Any]:
    """Normalize the loaded paragraphs into the working copy."""
    workspace = _require_document()
    normalizer = ParagraphNormalizer(
        replace_special_chars=_state["settings"]["replace_special_chars"]
    )
    result = normalizer.normalize(workspace.paragraphs)
    workspace.normalized = result.paragraphs
    return result.to_dict()


@router.put("/api/paragraphs/{number}")
async def edit_paragraph(number: int, request: ParagraphEditRequest) -> dict[str, Any]:
    """Replace the text of a paragraph, addressed by its 1-based number."""
    workspace = _require_document()
    try:
        index = _validator.validate_paragraph_number(
            number, len(workspace.display_paragraphs)
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=400, detail=_formatter.format_validation_error(e).to_dict()
        )

    paragraphs = workspace.replace_paragraph(index, request.text)
    logger.info("Paragraph %d edited", number)
    return {
        "number": number,
        "paragraph": paragraphs[index],
        "paragraph_count": len(paragraphs),
    }


@router.get("/api/paragraphs/search")
async def search_paragraph(item: str) -> dict[str, Any]:
    """Find a paragraph by its printed item number (e.g. "6.1.2")."""
    workspace = _require_document()
    result = find_paragraph_by_item_number(workspace.display_paragraphs, item)
    data = result.to_dict()
    data["number"] = result.index + 1 if result.found else None
    return data


# ============================================================================
# Numbering Endpoints
# ============================================================================


@router.get("/api/numbering/check")
async def numbering_check() -> dict[str, Any]:
    """Check flat numbering ("1.", "2.", ...) of the working copy."""
    workspace = _require_document()
    issues = check_numbering(workspace.display_paragraphs)
    return {
        "ok": not issues,
        "issue_count": len(issues),
        "issues": [issue.to_dict() for issue in issues],
    }


@router.post("/api/numbering/renumber")
async def numbering_renumber() -> dict[str, Any]:
    """Repair hierarchical numbering of the working copy in place."""
    workspace = _require_document()
    before = workspace.display_paragraphs
    after = renumber_hierarchical(before)
    changed = [i for i, (old, new) in enumerate(zip(before, after)) if old != new]
    workspace.normalized = after
    logger.info("Renumbering changed %d paragraphs", len(changed))
    return {
        "changed_count": len(changed),
        "changed_indices": changed,
        "paragraphs": after,
    }


@router.get("/api/numbering/scheme")
async def numbering_scheme() -> dict[str, Any]:
    """Describe which numbering style the working copy uses."""
    workspace = _require_document()
    return NumberingScheme.detect(workspace.display_paragraphs).to_dict()


# ============================================================================
# Comparison Endpoints
# ============================================================================


@router.post("/api/compare")
async def compare_documents() -> dict[str, Any]:
    """Compare the reference document against the working copy."""
    workspace = _get_workspace()
    if not workspace.reference or not workspace.display_paragraphs:
        raise HTTPException(
            status_code=400,
            detail="Load both the primary and the reference document first",
        )
    result = compare_paragraph_sets(workspace.reference, workspace.display_paragraphs)
    return result.to_dict()


# ============================================================================
# Export Endpoints
# ============================================================================


@router.get("/api/export/formats")
async def get_export_formats() -> dict[str, Any]:
    """Get available export formats."""
    return {
        "formats": ExporterRegistry.available_exporters(),
        "default": _state["settings"]["default_export_format"],
    }


@router.get("/api/export/{format}")
async def export_document(format: str) -> Response:
    """Download the working copy in the requested format."""
    workspace = _require_document()
    exporter = ExporterRegistry.get_exporter(format)
    if exporter is None:
        available = ", ".join(ExporterRegistry.available_exporters())
        raise HTTPException(
            status_code=400,
            detail=f"Unknown export format: {format}. Available: {available}",
        )

    try:
        content = exporter.export(
            workspace.display_paragraphs,
            title=_state["settings"]["export_title"],
        )
    except Exception as e:
        logger.exception("Export to %s failed", format)
        raise HTTPException(
            status_code=500, detail=_formatter.format_export_error(e).to_dict()
        )

    filename = exporter.output_filename(workspace.name)
    return Response(
        content=content,
        media_type=exporter.MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
            "X-Exported-At": datetime.now().isoformat(),
        },
    )


# ============================================================================
# Utility Endpoints
# ============================================================================


@router.get("/api/loaders")
async def get_available_loaders() -> dict[str, Any]:
    """Get supported upload formats."""
    return {
        "extensions": LoaderRegistry.supported_extensions(),
    }


@router.get("/api/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": __version__,
    }


@router.get("/api/settings")
async def get_settings() -> dict[str, Any]:
    """Get application settings."""
    return _state["settings"]


@router.post("/api/settings")
async def save_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Save application settings."""
    # Update settings, preserving any that weren't sent
    _state["settings"].update(settings)
    return {"saved": True}


app.include_router(router)


def run_server(host: str = "127.0.0.1", port: int = 8430) -> None:
    """Start the Docket server via uvicorn.

    Args:
        host: Bind address. Defaults to localhost.
        port: Port number. Defaults to 8430.
    """
    import uvicorn

    uvicorn.run(app, host=host, port=port)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    run_server()


if __name__ == "__main__":
    main()

"""
HTTP Microservice
=================
Flask-based HTTP API for the transcript parser.

Endpoints:
    POST   /api/parse    → Parse an uploaded transcript PDF
    GET    /api/health   → Health check
    GET    /api/info     → Parser version info

/api/parse accepts either a multipart upload (field "pdf", or "file")
or a raw body sent with Content-Type: application/pdf. The response is
the transcript record; ?validation=1 also returns the validation report.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import __version__
from .engine import ParserConfig, ParserEngine
from .pdf_text import PdfTextError

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

NO_PDF_MESSAGE = (
    'No PDF provided. POST with multipart field "pdf" or raw PDF body.'
)


def create_app(config: dict = None) -> Flask:
    """Create and configure the Flask app."""
    if config:
        app.config.update(config)

    app.config.setdefault("MAX_CONTENT_LENGTH", 50 * 1024 * 1024)  # 50MB
    app.config.setdefault("INCLUDE_VALIDATION", False)

    return app


# ─── Health Check ─────────────────────────────────────────────────────────────


@app.route("/api/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "cpe-parser",
        "version": __version__,
    })


@app.route("/api/info", methods=["GET"])
def info():
    """Parser version and capability info."""
    return jsonify({
        "version": __version__,
        "engine": "PyMuPDF",
        "capabilities": [
            "header_extraction",
            "activity_extraction",
            "disclaimer_extraction",
            "validation_report",
        ],
        "supported_formats": ["pdf"],
    })


# ─── Parse Endpoint ──────────────────────────────────────────────────────────


@app.route("/api/parse", methods=["GET", "POST"])
def parse_pdf():
    """
    Parse a transcript PDF synchronously and return the record.
    """
    if request.method != "POST":
        return jsonify({"error": "Only POST requests are accepted."}), 405

    content, filename = _read_pdf_upload()
    if content is None:
        return jsonify({"error": NO_PDF_MESSAGE}), 400

    include_validation = (
        request.args.get("validation") in ("1", "true")
        or app.config.get("INCLUDE_VALIDATION", False)
    )

    try:
        engine = ParserEngine(ParserConfig(save_output=False))
        result = engine.parse_bytes(content, source_name=filename)
    except PdfTextError as e:
        logger.warning(f"Rejected upload {filename}: {e}")
        return jsonify({"error": str(e)}), 422

    payload = result.transcript.model_dump()
    if include_validation:
        payload = {
            "transcript": payload,
            "validation": result.validation.model_dump(),
        }
    return jsonify(payload), 200


def _read_pdf_upload() -> tuple[bytes | None, str]:
    """Pull PDF bytes from a multipart field or a raw application/pdf body."""
    for field_name in ("pdf", "file"):
        if field_name in request.files:
            file = request.files[field_name]
            if not file.filename:
                return None, ""
            return file.read(), file.filename

    if request.content_type and "application/pdf" in request.content_type:
        body = request.get_data()
        if body:
            return body, "upload.pdf"

    return None, ""


# ─── Run Server ──────────────────────────────────────────────────────────────


def run_server(
    host: str = "0.0.0.0",
    port: int = 5000,
    debug: bool = False,
):
    """Start the microservice server."""
    create_app()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_server(debug=True)

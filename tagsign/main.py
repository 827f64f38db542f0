# tagsign/main.py
from __future__ import annotations
import base64
from typing import Any, Callable, Dict, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

from tagsign.config import AppConfig, ConfigError, OCR_MODES, load_config
from tagsign.docuseal import DocuSealClient, DocuSealError, create_docuseal_client
from tagsign.extractors.errors import ExtractorFault, UnsupportedFormat
from tagsign.extractors.models import ExtractedField
from tagsign.extractors.patterns import ERROR_MESSAGES, PATTERNS_VERSION
from tagsign.extractors.pipeline import MIME_BY_FORMAT, detect_format, extract_document
from tagsign.extractors.validators import (
    validate_file_size, validate_submission_body, validate_template_body,
)
from tagsign.logging import bind_request, configure_logging, get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[AppConfig], DocuSealClient]


def create_app(config: Optional[AppConfig] = None,
               docuseal_factory: Optional[ClientFactory] = None) -> Flask:
    cfg = config or load_config()
    make_client = docuseal_factory or create_docuseal_client
    configure_logging(cfg.log_level)

    app = Flask(__name__)
    # room for the multipart envelope; the file itself is checked against max_upload_mb
    app.config["MAX_CONTENT_LENGTH"] = cfg.max_upload_bytes + 64 * 1024
    CORS(app)

    @app.before_request
    def _bind_request_context():
        bind_request(method=request.method, path=request.path)

    @app.errorhandler(413)
    def _too_large(_e):
        return _fail(ERROR_MESSAGES["FILE_TOO_LARGE"].format(max_mb=cfg.max_upload_mb), 400)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled_error", error=str(e))
        return _fail("Internal server error", 500, detail=f"{type(e).__name__}: {e}")

    @app.get("/")
    def root():
        return jsonify({"ok": True, "service": "tagsign", "path": "/"}), 200

    @app.get("/health")
    def health():
        return jsonify({"ok": True}), 200

    @app.get("/healthz")
    def healthz():
        return jsonify({"ok": True, "service": "tagsign", "patterns": PATTERNS_VERSION}), 200

    # -------------------------
    # Tag extraction
    # -------------------------

    @app.post("/extract-coordinates")
    def api_extract():
        file = request.files.get("file")
        if not file or not getattr(file, "filename", ""):
            return _fail("No file provided", 400)

        try:
            fmt = detect_format(file.filename, file.mimetype)
        except UnsupportedFormat as e:
            return _fail(str(e), 415)

        data = file.read()
        if not validate_file_size(len(data), cfg.max_upload_mb):
            return _fail(ERROR_MESSAGES["FILE_TOO_LARGE"].format(max_mb=cfg.max_upload_mb), 400)

        ocr = (request.args.get("ocr") or cfg.ocr_mode).lower()   # auto | force | off
        if ocr not in OCR_MODES:
            return _fail(f"ocr must be one of {', '.join(OCR_MODES)}", 400)

        try:
            result = extract_document(data, fmt, ocr=ocr, lang=cfg.ocr_lang, max_pages=cfg.max_pages)
        except ExtractorFault as e:
            logger.error("extraction_failed", filename=secure_filename(file.filename), error=str(e))
            return _fail(ERROR_MESSAGES["CONVERSION_FAILED"], 500, detail=str(e))

        body = result.to_dict()
        if not result.success:
            return jsonify(body), 400

        b64 = base64.b64encode(data).decode("ascii")
        body["pdfPreviewUrl"] = f"data:{MIME_BY_FORMAT[fmt]};base64,{b64}"
        return jsonify(body), 200

    # -------------------------
    # DocuSeal proxy
    # -------------------------

    def _call(fn: Callable[[DocuSealClient], Any], status: int = 200):
        try:
            client = make_client(cfg)
        except ConfigError as e:
            return jsonify({"error": str(e), "code": "CONFIG_ERROR"}), 500
        try:
            with client:
                data = fn(client)
        except DocuSealError as e:
            logger.error("docuseal_call_failed", code=e.code, error=e.message)
            return jsonify(e.to_dict()), e.status_code
        return jsonify(data), status

    @app.get("/api/docuseal/templates")
    def list_templates():
        return _call(lambda c: c.get_templates())

    @app.post("/api/docuseal/templates")
    def create_template():
        body: Dict[str, Any] = request.get_json(silent=True) or {}
        err = validate_template_body(body)
        if err:
            return jsonify({"error": err}), 400
        try:
            fields = [ExtractedField.from_dict(f) for f in body["fields"]]
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid field: {e}"}), 400

        return _call(lambda c: c.create_template(
            body["name"],
            body["documentName"],
            body["documentBase64"],
            fields,
            external_id=body.get("externalId"),
            folder_name=body.get("folderName"),
            file_type=body.get("fileType") or "pdf",
        ), status=201)

    @app.get("/api/docuseal/templates/<int:template_id>")
    def get_template(template_id: int):
        return _call(lambda c: c.get_template(template_id))

    @app.put("/api/docuseal/templates/<int:template_id>")
    def update_template(template_id: int):
        updates = request.get_json(silent=True)
        if not isinstance(updates, dict) or not updates:
            return jsonify({"error": "Request body must be a non-empty object"}), 400
        return _call(lambda c: c.update_template(template_id, updates))

    @app.delete("/api/docuseal/templates/<int:template_id>")
    def archive_template(template_id: int):
        return _call(lambda c: c.archive_template(template_id))

    @app.get("/api/docuseal/submissions")
    def list_submissions():
        template_id = request.args.get("template_id", type=int)

        def fetch(c: DocuSealClient):
            resp = c.get_submissions(template_id)
            if isinstance(resp, dict):
                return resp
            # DocuSeal answers {data, pagination}; normalise anything else
            return {
                "data": resp if isinstance(resp, list) else [],
                "pagination": {"count": 0, "next": None, "prev": None},
            }

        return _call(fetch)

    @app.post("/api/docuseal/submissions")
    def create_submission():
        body: Dict[str, Any] = request.get_json(silent=True) or {}
        err = validate_submission_body(body)
        if err:
            return jsonify({"error": err}), 400
        return _call(lambda c: c.create_submission(body), status=201)

    @app.get("/api/docuseal/submissions/<int:submission_id>")
    def get_submission(submission_id: int):
        return _call(lambda c: c.get_submission(submission_id))

    return app


def _fail(msg: str, status: int, detail: Optional[str] = None):
    body: Dict[str, Any] = {"success": False, "error": msg}
    if detail:
        body["detail"] = detail
    return jsonify(body), status

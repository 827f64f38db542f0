# tagsign/docuseal.py
# DocuSeal API client.
#
# Templates are created with a hybrid payload: the uploaded document keeps its
# {{tags}} so DocuSeal places the fields itself, and the ``fields`` array only
# carries name/type/role metadata (no areas). DocuSeal strips the tags afterwards.

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import httpx

from .config import AppConfig, ConfigError
from .extractors.models import ExtractedField
from .logging import get_logger

logger = get_logger(__name__)


class DocuSealError(Exception):
    def __init__(self, code: str, message: str, details: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return 503 if self.code == "NETWORK_ERROR" else 500

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, "details": self.details}


def to_docuseal_field(field: ExtractedField, include_areas: bool = True) -> Dict[str, Any]:
    """Remote field shape; areas only for coordinate-based placement."""
    out: Dict[str, Any] = {
        "name": field.name,
        "type": field.type,
        "role": field.role,
        "required": field.required,
        "readonly": field.readonly,
    }
    if field.default_value is not None:
        out["default_value"] = field.default_value
    if include_areas and field.areas:
        out["areas"] = [a.to_dict() for a in field.areas]
    return out


class DocuSealClient:
    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.docuseal.com",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=api_url,
            headers={"X-Auth-Token": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DocuSealClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            try:
                body = exc.response.json()
            except ValueError:
                body = exc.response.text or None
            message = (body.get("message") or body.get("error")) if isinstance(body, dict) else None
            logger.warning("docuseal_error", method=method, path=path, status=status)
            raise DocuSealError(f"HTTP_{status}", message or str(exc), body) from exc
        except httpx.RequestError as exc:
            logger.warning("docuseal_unreachable", method=method, path=path, error=str(exc))
            raise DocuSealError("NETWORK_ERROR", str(exc)) from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("docuseal_bad_reply", method=method, path=path, status=response.status_code)
            raise DocuSealError("UNKNOWN_ERROR", "Unexpected response from DocuSeal", response.text[:200]) from exc

    # -------------------------
    # Templates
    # -------------------------

    def create_template(
        self,
        name: str,
        document_name: str,
        document_base64: str,
        fields: Iterable[ExtractedField],
        external_id: Optional[str] = None,
        folder_name: Optional[str] = None,
        file_type: str = "pdf",
    ) -> Any:
        if file_type not in ("pdf", "docx"):
            raise ValueError(f"file_type must be 'pdf' or 'docx', got {file_type!r}")
        payload: Dict[str, Any] = {
            "name": name,
            "documents": [
                {
                    "name": document_name,
                    "file": document_base64,
                    "fields": [to_docuseal_field(f, include_areas=False) for f in fields],
                    "remove_tags": True,
                }
            ],
        }
        if external_id:
            payload["external_id"] = external_id
        if folder_name:
            payload["folder_name"] = folder_name
        return self._request("POST", f"/templates/{file_type}", json=payload)

    def get_templates(self) -> Any:
        return self._request("GET", "/templates")

    def get_template(self, template_id: int) -> Any:
        return self._request("GET", f"/templates/{template_id}")

    def update_template(self, template_id: int, updates: Dict[str, Any]) -> Any:
        return self._request("PUT", f"/templates/{template_id}", json=updates)

    def archive_template(self, template_id: int) -> Any:
        return self._request("DELETE", f"/templates/{template_id}")

    # -------------------------
    # Submissions
    # -------------------------

    def create_submission(self, payload: Dict[str, Any]) -> Any:
        return self._request("POST", "/submissions", json=payload)

    def get_submissions(self, template_id: Optional[int] = None) -> Any:
        params = {"template_id": template_id} if template_id else None
        return self._request("GET", "/submissions", params=params)

    def get_submission(self, submission_id: int) -> Any:
        return self._request("GET", f"/submissions/{submission_id}")


def create_docuseal_client(config: AppConfig) -> DocuSealClient:
    if not config.docuseal_api_key:
        raise ConfigError("DOCUSEAL_API_KEY environment variable is not set")
    return DocuSealClient(
        config.docuseal_api_key,
        config.docuseal_api_url,
        timeout=config.http_timeout,
    )

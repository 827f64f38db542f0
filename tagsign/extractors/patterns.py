# tagsign/extractors/patterns.py
from __future__ import annotations
import re
from typing import Dict, Tuple

PATTERNS_VERSION = "v1.0.0"

# {{name}} or {{name;key=value;...}}; no escape for a literal "}}"
TAG_RE = re.compile(r"\{\{([^}]+)\}\}")

FIELD_TYPES: Tuple[str, ...] = (
    "text", "signature", "initials", "date", "checkbox", "image",
    "file", "phone", "number", "select", "radio", "stamp",
)
DEFAULT_FIELD_TYPE = "text"
DEFAULT_ROLE = "First Party"

# Order matters: first matching entry wins, not the longest substring.
FIELD_TYPE_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("signature", ("_signature", "signature", "_sign")),
    ("initials",  ("_initials", "initials")),
    ("date",      ("_date", "date")),
    ("image",     ("_image", "image", "photo", "attachment", "logo")),
    ("checkbox",  ("checkbox", "check_", "_agree", "_confirm")),
    ("phone",     ("phone", "telephone", "mobile", "cell")),
    ("number",    ("_amount", "amount", "total_", "price", "cost", "qty")),
    ("text",      ()),
    ("file",      ("_file", "file", "attachment")),
    ("select",    ("_select", "select", "dropdown")),
    ("radio",     ("_radio", "radio", "option")),
    ("stamp",     ("_stamp", "stamp")),
)

ROLE_PATTERNS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Service Provider", ("provider_", "provider", "vendor_", "seller_")),
    ("Client",           ("client_", "client", "customer_", "buyer_", "tenant_")),
    ("First Party",      ()),
)

AVAILABLE_ROLES: Tuple[str, ...] = ("First Party", "Second Party", "Service Provider", "Client")

FIELD_TYPE_DESCRIPTIONS: Dict[str, str] = {
    "text": "Single-line text input",
    "signature": "Electronic signature",
    "initials": "Initials field",
    "date": "Date picker",
    "checkbox": "Checkbox (true/false)",
    "image": "Image upload",
    "file": "File attachment",
    "phone": "Phone number",
    "number": "Numeric input",
    "select": "Dropdown selection",
    "radio": "Radio button group",
    "stamp": "Date/time stamp",
}

ERROR_MESSAGES: Dict[str, str] = {
    "INVALID_FILE_TYPE": "Please upload a valid PDF or DOCX file",
    "FILE_TOO_LARGE": "File size must be less than {max_mb}MB",
    "CONVERSION_FAILED": "Failed to process document. Please try again.",
    "NO_TAGS_FOUND": (
        "No {{tags}} found in document. "
        "Add placeholders like {{signature}} to your document."
    ),
    "API_ERROR": "DocuSeal API error. Please check your API key.",
    "NETWORK_ERROR": "Network error. Please check your connection.",
}

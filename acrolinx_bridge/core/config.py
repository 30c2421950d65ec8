import os

MAX_BUFFER_BYTES = int(os.getenv("MAX_BUFFER_BYTES", str(10 * 1024 * 1024)))  # 10 MB soft cap

# Acrolinx server
SERVER_URL = os.getenv("ACROLINX_URL", "")
# Public signature for integration development; licensed integrations override it
CLIENT_SIGNATURE = os.getenv(
    "ACROLINX_CLIENT_SIGNATURE", "SW50ZWdyYXRpb25EZXZlbG9wbWVudERlbW9Pbmx5"
)
API_TOKEN = os.getenv("ACROLINX_API_TOKEN")
DEFAULT_TARGET = os.getenv("ACROLINX_DEFAULT_TARGET")

CLIENT_HEADER = "X-Acrolinx-Client"
AUTH_HEADER = "X-Acrolinx-Auth"

CAPABILITIES_PATH = "/api/v1/checking/capabilities"
CHECKS_PATH = "/api/v1/checking/checks"

# Polling
MAX_POLL_ATTEMPTS = int(os.getenv("ACROLINX_MAX_POLL_ATTEMPTS", "60"))
POLL_INTERVAL = float(os.getenv("ACROLINX_POLL_INTERVAL", "1.5"))  # seconds
HTTP_TIMEOUT = float(os.getenv("ACROLINX_HTTP_TIMEOUT", "30"))

CHECK_TYPE = "interactive"
CONTENT_ENCODING = "base64"
AUTO_FORMAT = "AUTO"

CONTENT_FORMATS = {
    "text-mode": "TEXT",
    "markdown-mode": "MARKDOWN",
    "gfm-mode": "MARKDOWN",
    "html-mode": "HTML",
    "mhtml-mode": "HTML",
    "web-mode": "HTML",
    "nxml-mode": "XML",
    "xml-mode": "XML",
    "json-mode": "JSON",
    "yaml-mode": "YAML",
    "conf-javaprop-mode": "PROPERTIES",
    "latex-mode": "TEX",
}

DEFAULT_FACE = "acrolinx-issue"

"""API server configuration."""

import os

API_HOST = os.environ.get("CYBERSEC_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("CYBERSEC_API_PORT", "19877"))

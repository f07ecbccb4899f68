"""CyberSec Monitor - clipboard hijack detection and security scoring."""

__version__ = "1.0.0"

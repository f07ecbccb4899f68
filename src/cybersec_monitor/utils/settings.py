"""
Settings management for CyberSec Monitor.

Two sources of configuration:
- Settings: user preferences persisted as JSON under ~/.config/cybersec-monitor
- Entitlements: capability predicates derived from the environment
  (DEV_MODE, LICENSE_TOKEN). They only change recommendation text,
  never detection.
"""

import json
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Dict, Optional

CONFIG_DIR = os.path.expanduser("~/.config/cybersec-monitor")
CONFIG_FILE = os.path.join(CONFIG_DIR, "settings.json")


@dataclass
class Settings:
    """Detection toggles and scan cadence"""

    # Clipboard hijack detection
    clipboard_monitoring: bool = True

    # Signature based malware findings from external scanners
    malware_detection: bool = True

    # Seconds between background clipboard checks
    scan_interval: int = 30

    # Label reported in SystemInfo.scan_scope
    scan_scope: str = "System"

    def save(self):
        """Write every field to CONFIG_FILE, replacing what was there."""
        os.makedirs(CONFIG_DIR, exist_ok=True)
        with open(CONFIG_FILE, "w") as out:
            json.dump(asdict(self), out, indent=2)

    @classmethod
    def load(cls) -> "Settings":
        """Read CONFIG_FILE; any missing or unreadable file gives defaults.

        Keys that are no longer settings are dropped.
        """
        try:
            with open(CONFIG_FILE, "r") as src:
                stored = json.load(src)
            known = {f.name for f in fields(cls)}
            return cls(**{k: v for k, v in stored.items() if k in known})
        except (OSError, ValueError, TypeError, AttributeError):
            return cls()


# Features gated behind a subscription
FEATURES = (
    "fix_issues",
    "advanced_analysis",
    "automated_remediation",
    "export_reports",
)

SUBSCRIPTION_MESSAGES = {
    "fix_issues": "🔒 Issue remediation requires a subscription. I can detect problems, but fixing them requires upgrading.",
    "advanced_analysis": "🔒 Advanced malware analysis requires a subscription. Basic detection is available.",
    "automated_remediation": "🔒 Automated remediation requires a subscription. Manual steps can be provided.",
    "export_reports": "🔒 Report export requires a subscription. View results in the terminal.",
}


@dataclass(frozen=True)
class Entitlements:
    """Which capabilities are unlocked for this process."""

    dev_mode: bool = False
    license_token: Optional[str] = None
    features: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "Entitlements":
        """Build entitlements from DEV_MODE and LICENSE_TOKEN."""
        dev_mode = os.environ.get("DEV_MODE", "").lower() == "true"
        license_token = os.environ.get("LICENSE_TOKEN") or None
        unlocked = dev_mode or license_token is not None
        return cls(
            dev_mode=dev_mode,
            license_token=license_token,
            features={name: unlocked for name in FEATURES},
        )

    @property
    def has_active_subscription(self) -> bool:
        return self.dev_mode or self.license_token is not None

    def feature_available(self, feature: str) -> bool:
        """Check if a specific feature is unlocked."""
        if self.dev_mode:
            return True
        return self.features.get(feature, False)

    def subscription_message(self, feature: str) -> str:
        """User-facing explanation of a feature's availability."""
        if self.has_active_subscription:
            return "Feature available with your subscription."
        return SUBSCRIPTION_MESSAGES.get(
            feature, "🔒 This feature requires a subscription."
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide Settings, loaded from disk on first access."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def save_settings():
    """Persist the process-wide Settings; nothing to do if never loaded."""
    if _settings:
        _settings.save()

"""Signature catalog for findings handed over by external scanners.

Scanners report (path, signature id) pairs; the catalog turns them into
threats. Signatures are loaded from YAML so they can be updated without
touching code.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..utils.logger import get_logger
from .threats import SecurityThreat
from .types import ThreatLevel, ValidationError

logger = get_logger("signatures")

MALWARE_PREFIX = "Malware"
DEFAULT_FINDING_CONFIDENCE = 0.75


class ThreatTarget(Enum):
    """Audience a signature's malware family goes after"""

    CRYPTO_USERS = "crypto_users"
    DEVELOPERS = "developers"
    GENERAL = "general"
    SUPPLY_CHAIN = "supply_chain"


@dataclass(frozen=True)
class ThreatSignature:
    """A known malware signature."""

    id: str
    name: str
    pattern: str
    severity: ThreatLevel
    description: str
    target: ThreatTarget

    def __post_init__(self):
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern for '{self.id}': {e}")

    def matches(self, text: str) -> bool:
        return bool(re.search(self.pattern, text, re.IGNORECASE))


class SignatureCatalog:
    """Loads and indexes threat signatures."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize catalog with optional custom config path."""
        if config_path is None:
            config_path = self._get_default_config_path()

        self.config_path = config_path
        self._signatures: Dict[str, ThreatSignature] = {}

        if config_path.exists():
            self.load()
        else:
            logger.warning(f"Signature file not found: {config_path}")

    @staticmethod
    def _get_default_config_path() -> Path:
        return Path(__file__).parent / "config" / "signatures.yaml"

    def load(self) -> None:
        """Load signatures from YAML configuration."""
        with open(self.config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        signatures = {}
        for entry in data.get("signatures", []):
            signature = ThreatSignature(
                id=entry["id"],
                name=entry["name"],
                pattern=entry["pattern"],
                severity=ThreatLevel.parse(entry["severity"]),
                description=entry["description"],
                target=ThreatTarget(entry.get("target", "general")),
            )
            signatures[signature.id] = signature

        self._signatures = signatures
        logger.debug(f"Loaded {len(signatures)} signatures from {self.config_path}")

    def __len__(self) -> int:
        return len(self._signatures)

    def __contains__(self, signature_id: str) -> bool:
        return signature_id in self._signatures

    def get(self, signature_id: str) -> Optional[ThreatSignature]:
        return self._signatures.get(signature_id)

    def all(self) -> List[ThreatSignature]:
        return list(self._signatures.values())

    def by_target(self, target: ThreatTarget) -> List[ThreatSignature]:
        return [s for s in self._signatures.values() if s.target == target]

    def matches(self, signature_id: str, text: str) -> bool:
        """Check text against one signature (unknown ids never match)."""
        signature = self.get(signature_id)
        return signature is not None and signature.matches(text)

    def threat_from_finding(
        self,
        path: str,
        signature_id: str,
        confidence: float = DEFAULT_FINDING_CONFIDENCE,
    ) -> SecurityThreat:
        """Build a threat for a scanner finding.

        Raises:
            ValidationError: unknown signature id or bad confidence
        """
        signature = self.get(signature_id)
        if signature is None:
            raise ValidationError(f"Unknown signature: {signature_id!r}")

        return SecurityThreat.create(
            threat_type=f"{MALWARE_PREFIX}: {signature.name}",
            description=signature.description,
            threat_level=signature.severity,
            confidence=confidence,
            affected_resources=[path],
            recommendations=[
                f"Quarantine or remove {path}",
                "Run a full scan of locations targeted by this malware family",
            ],
        )


_default_catalog: Optional[SignatureCatalog] = None


def get_signature_catalog() -> SignatureCatalog:
    """Get the catalog loaded from the packaged signatures file."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = SignatureCatalog()
    return _default_catalog

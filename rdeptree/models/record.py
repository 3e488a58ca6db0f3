"""
Metadata record data model for rdeptree.

A :class:`MetadataRecord` is the parsed representation of one installed
distribution: its name, its installed version, and the ordered list of
requirements it declares.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from packaging.utils import canonicalize_name

from rdeptree.models.specifier import DependencySpecifier


@dataclass(frozen=True)
class MetadataRecord:
    """One installed distribution's parsed metadata.

    Attributes:
        name: Distribution name exactly as written in the ``Name`` row.
        version: Installed version from the ``Version`` row.
        requirements: ``Requires-Dist`` specifiers in file order.
        source: Path of the metadata file, when read from disk.
    """

    name: str
    version: str
    requirements: Tuple[DependencySpecifier, ...] = ()
    source: Optional[str] = None

    @property
    def key(self) -> str:
        """Return the PEP 503 normalized name used to link records."""
        return canonicalize_name(self.name)

    def __str__(self) -> str:
        return f"{self.name}=={self.version}"

    def to_json(self) -> Dict[str, Any]:
        """
        Serialize the record to a JSON-compatible dictionary.

        Returns:
            Name, version, and requirements in file order.
        """
        entry: Dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "requirements": [spec.to_json() for spec in self.requirements],
        }
        if self.source is not None:
            entry["source"] = self.source
        return entry

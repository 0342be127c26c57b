"""
capordino.cprt - CPRT export models, graph index, loader and API client
"""

from capordino.cprt.graph import DataIntegrityError, ElementGraph
from capordino.cprt.models import (
    CprtElement,
    CprtMetadataVersion,
    CprtRelationship,
    make_global_identifier,
)

__all__ = [
    "CprtElement",
    "CprtMetadataVersion",
    "CprtRelationship",
    "DataIntegrityError",
    "ElementGraph",
    "make_global_identifier",
]

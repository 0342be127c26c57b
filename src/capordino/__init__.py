"""
capordino - Cybersecurity And Privacy Open Reference Datasets In OSCAL

Converts framework exports from the NIST Cybersecurity and Privacy Reference
Tool (CPRT) into OSCAL control catalogs. The CPRT export is a flat graph of
typed elements and relationships; capordino walks that graph and emits the
nested groups, controls, parts, parameters and links of an OSCAL catalog.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("capordino")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__author__ = "NIST"
__license__ = "MIT"

from capordino.conversion.assembler import CatalogAssembler, convert
from capordino.conversion.builder import CatalogBuilder
from capordino.conversion.descriptor import FrameworkDescriptor, get_descriptor
from capordino.cprt.graph import DataIntegrityError, ElementGraph
from capordino.cprt.models import CprtElement, CprtMetadataVersion, CprtRelationship

__all__ = [
    "__version__",
    "CatalogAssembler",
    "CatalogBuilder",
    "CprtElement",
    "CprtMetadataVersion",
    "CprtRelationship",
    "DataIntegrityError",
    "ElementGraph",
    "FrameworkDescriptor",
    "convert",
    "get_descriptor",
]

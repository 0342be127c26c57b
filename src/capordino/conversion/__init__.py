"""
capordino.conversion - CPRT graph to OSCAL catalog conversion
"""

from capordino.conversion.assembler import CatalogAssembler, convert
from capordino.conversion.builder import CatalogBuilder
from capordino.conversion.descriptor import (
    BUILTIN_DESCRIPTORS,
    FrameworkDescriptor,
    FrameworkMismatchError,
    UnknownFrameworkError,
    available_descriptors,
    get_descriptor,
)

__all__ = [
    "BUILTIN_DESCRIPTORS",
    "CatalogAssembler",
    "CatalogBuilder",
    "FrameworkDescriptor",
    "FrameworkMismatchError",
    "UnknownFrameworkError",
    "available_descriptors",
    "convert",
    "get_descriptor",
]

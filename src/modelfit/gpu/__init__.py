"""GPU capability resolution: reference database, normalizer, resolver."""

from modelfit.gpu.database import ReferenceDatabase, load_database, load_default
from modelfit.gpu.normalize import normalize, variations
from modelfit.gpu.profile import CapabilityProfile, GPUMemory, PlatformClass, Vendor
from modelfit.gpu.resolver import GPUResolver

__all__ = [
    "CapabilityProfile",
    "GPUMemory",
    "GPUResolver",
    "PlatformClass",
    "ReferenceDatabase",
    "Vendor",
    "load_database",
    "load_default",
    "normalize",
    "variations",
]

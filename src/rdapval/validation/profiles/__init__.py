"""Server profile overlays applied after base RDAP validation."""

from .base import ProfileRule
from .gtld import GTLDProfile, GTLDRegistrarProfile, GTLDRegistryProfile
from .rir import RIRProfile

__all__ = [
    "GTLDProfile",
    "GTLDRegistrarProfile",
    "GTLDRegistryProfile",
    "ProfileRule",
    "RIRProfile",
]

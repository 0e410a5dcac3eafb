"""Specification registry used to build citation links for results."""

from dataclasses import dataclass
from enum import Enum

from ..constants import DEFAULT_REFERENCE_BASE


class FragmentStyle(str, Enum):
    """How a fragment is appended to a specification URL."""
    ANCHOR = "anchor"      # HTML documents: #section-4.1
    PDF_PAGE = "pdf_page"  # PDF documents: #page=12
    NONE = "none"          # plain text, no addressable fragments


@dataclass(frozen=True)
class Specification:
    """A normative document that results can cite."""
    key: str
    title: str
    path: str
    fragment_style: FragmentStyle = FragmentStyle.ANCHOR
    absolute: bool = False

    def url(self, base: str) -> str:
        if self.absolute:
            return self.path
        return base + self.path


SPECIFICATIONS: dict[str, Specification] = {
    spec.key: spec for spec in [
        Specification("rfc7480", "HTTP Usage in RDAP", "vanilla/rfc7480.html"),
        Specification("rfc7481", "Security Services for RDAP", "vanilla/rfc7481.html"),
        Specification("rfc9082", "RDAP Query Format", "vanilla/rfc9082.html"),
        Specification("rfc9083", "JSON Responses for RDAP", "vanilla/rfc9083.html"),
        Specification("rfc9224", "Finding the Authoritative RDAP Service", "vanilla/rfc9224.html"),
        Specification("rfc9537", "Redacted Fields in RDAP", "vanilla/rfc9537.html"),
        Specification(
            "rfc6350", "vCard Format Specification",
            "https://www.rfc-editor.org/rfc/rfc6350.html", absolute=True,
        ),
        Specification(
            "rfc7095", "jCard: The JSON Format for vCard",
            "https://www.rfc-editor.org/rfc/rfc7095.html", absolute=True,
        ),
        Specification(
            "feb24-rp", "gTLD RDAP Response Profile (February 2024)",
            "gtld/2024-02/rdap-response-profile-21feb24-en.pdf",
            FragmentStyle.PDF_PAGE,
        ),
        Specification(
            "feb24-tig", "gTLD RDAP Technical Implementation Guide (February 2024)",
            "gtld/2024-02/rdap-technical-implementation-guide-21feb24-en.pdf",
            FragmentStyle.PDF_PAGE,
        ),
        Specification(
            "nro", "NRO RDAP Profile (January 2021)",
            "rir/2021-01/nro-rdap-profile.txt",
            FragmentStyle.NONE,
        ),
    ]
}

# Sections of RFC 9083 defining each object class
OBJECT_CLASS_NAME_REFERENCES: dict[str, str] = {
    "entity": "section-5.1",
    "nameserver": "section-5.2",
    "domain": "section-5.3",
    "ip network": "section-5.4",
    "autnum": "section-5.5",
}


class SpecificationRegistry:
    """Builds reference URLs for the specifications a result may cite."""

    def __init__(self, base: str = DEFAULT_REFERENCE_BASE,
                 specifications: dict[str, Specification] | None = None):
        self.base = base if base.endswith("/") else base + "/"
        self.specifications = specifications or SPECIFICATIONS

    def __contains__(self, key: str) -> bool:
        return key in self.specifications

    def get(self, key: str) -> Specification:
        """Return the specification registered under ``key``.

        Raises:
            KeyError: If the specification is unknown
        """
        return self.specifications[key]

    def reference(self, key: str, fragment: str | int | None = None) -> str:
        """Build the URL citing ``fragment`` within specification ``key``."""
        spec = self.get(key)
        url = spec.url(self.base)

        if fragment is None or spec.fragment_style == FragmentStyle.NONE:
            return url
        if spec.fragment_style == FragmentStyle.PDF_PAGE:
            return f"{url}#page={fragment}"
        return f"{url}#{fragment}"

"""rdapval - Conformance checker for RDAP server responses.

rdapval validates RDAP responses against the IETF RDAP RFCs and the gTLD and
NRO server profiles, reporting path-addressed pass/fail results with links to
the normative text.
"""

__version__ = "0.1.0"
__author__ = "rdapval contributors"
__description__ = "Conformance checker for RDAP server responses"

from rdapval.config import ValidatorConfig
from rdapval.models import ResponseMetadata, ResponseType, ServerType
from rdapval.validation import RDAPValidator, ResultCollector, validate

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "ValidatorConfig",
    "ResponseMetadata",
    "ResponseType",
    "ServerType",
    "RDAPValidator",
    "ResultCollector",
    "validate",
]

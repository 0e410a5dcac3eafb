"""Request-side models shared by the validator, the fetcher and the CLI."""

import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import unquote, urlsplit

from .constants import OBJECT_TYPES, RESPONSE_TYPES, SERVER_TYPES


class ResponseType(str, Enum):
    """Kind of RDAP response the caller expects."""
    DOMAIN = "domain"
    NAMESERVER = "nameserver"
    ENTITY = "entity"
    IP_NETWORK = "ip network"
    AUTNUM = "autnum"
    HELP = "help"
    DOMAIN_SEARCH = "domain-search"
    NAMESERVER_SEARCH = "nameserver-search"
    ENTITY_SEARCH = "entity-search"
    ERROR = "error"

    @property
    def label(self) -> str:
        return RESPONSE_TYPES[self.value]

    @property
    def is_object(self) -> bool:
        """True for lookups returning a single object class instance."""
        return self.value in OBJECT_TYPES


class ServerType(str, Enum):
    """Kind of server, selecting which profile overlays apply."""
    VANILLA = "vanilla"
    GTLD_REGISTRY = "gtld-registry"
    GTLD_REGISTRAR = "gtld-registrar"
    RIR = "rir"

    @property
    def label(self) -> str:
        return SERVER_TYPES[self.value]


@dataclass
class ResponseMetadata:
    """HTTP-level facts about a fetched response."""
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    requested_url: str | None = None

    def __post_init__(self):
        # Header names are case-insensitive; keep them lower-cased
        self.headers = {name.lower(): value for name, value in self.headers.items()}


@dataclass(frozen=True)
class ValidationRequest:
    """What the caller asked to validate."""
    response_type: ResponseType
    server_type: ServerType
    metadata: ResponseMetadata | None = None
    requested_url: str | None = None

    @property
    def url(self) -> str | None:
        if self.metadata and self.metadata.requested_url:
            return self.metadata.requested_url
        return self.requested_url

    @property
    def headers(self) -> dict[str, str]:
        return self.metadata.headers if self.metadata else {}

    @property
    def queried_name(self) -> str | None:
        """Object name or handle from the last segment of the request URL.

        Percent-decoded and NFC-normalized; None without a request URL.
        """
        if not self.url:
            return None

        segment = urlsplit(self.url).path.rstrip("/").split("/")[-1]
        if not segment:
            return None
        return unicodedata.normalize("NFC", unquote(segment))

"""gTLD RDAP profile (February 2024) overlays for registries and registrars.

Page numbers cite the Response Profile PDF unless a check runs under the
Technical Implementation Guide.
"""

import logging
from typing import Any
from urllib.parse import urlsplit

from ...constants import BASE_CONFORMANCE_TOKEN, COUNTRY_CODES, RDAP_EXTENSIONS
from ...models import ResponseType, ServerType, ValidationRequest
from ..context import ValidationContext
from ..jcard import property_name
from ..predicates import (
    compare_unicode,
    find_key,
    is_array,
    is_integer_string,
    is_object,
    is_string,
    is_ulabel,
)
from .base import ProfileRule

logger = logging.getLogger(__name__)

RESPONSE_PROFILE = "feb24-rp"
IMPLEMENTATION_GUIDE = "feb24-tig"

REQUIRED_CONFORMANCE = (
    "icann_rdap_response_profile_1",
    "icann_rdap_technical_implementation_guide_1",
)

IANA_REGISTRAR_ID = "IANA Registrar ID"
REGISTRAR_IDS_URL = "https://www.iana.org/assignments/registrar-ids/registrar-ids.xhtml"

LAST_UPDATE_EVENT = "last update of RDAP database"
DOMAIN_EVENTS = ("registration", "expiration")

# (title, link rel, link href) of notices domain responses carry exactly once
REQUIRED_DOMAIN_NOTICES = (
    ("Status Codes", "glossary", "https://icann.org/epp"),
    ("RDDS Inaccuracy Complaint Form", "help", "https://icann.org/wicf"),
)

ABUSE_CONTACT_PROPERTIES = ("TEL", "EMAIL")
REGISTRAR_CONTACT_PROPERTIES = ("FN", "ADR", "TEL", "EMAIL")
TEL_TYPES = ("voice", "fax")

# ADR structured value components
ADR_STREET = 2
ADR_LOCALITY = 3
ADR_COUNTRY_NAME = 6


def has_role(entity: Any, role: str) -> bool:
    return is_object(entity) and is_array(entity.get("roles")) and role in entity["roles"]


def vcard_properties(entity: Any) -> list | None:
    """Property nodes of an entity's vcardArray, or None if malformed."""
    if not is_object(entity):
        return None
    vcard = entity.get("vcardArray")
    if is_array(vcard) and len(vcard) > 1 and is_array(vcard[1]):
        return vcard[1]
    return None


def notice_matches(notice: Any, title: str, rel: str, href: str) -> bool:
    """True if ``notice`` has ``title`` and a link with ``rel`` and ``href``."""
    if not is_object(notice) or notice.get("title") != title:
        return False
    links = notice.get("links")
    if not is_array(links):
        return False
    return any(
        is_object(link) and link.get("rel") == rel and link.get("href") == href
        for link in links
    )


def _is_non_empty_text(value: Any) -> bool:
    if is_string(value):
        return len(value) > 0
    if is_array(value):
        return any(is_string(v) and len(v) > 0 for v in value)
    return False


class GTLDProfile(ProfileRule):
    """Rules shared by the gTLD registry and registrar profiles."""

    specification = RESPONSE_PROFILE

    def __init__(self):
        super().__init__()
        self.handlers = {
            ResponseType.DOMAIN: self.validate_domain,
            ResponseType.HELP: self.validate_help,
            ResponseType.ERROR: self.validate_error,
        }

    # Response-level rules

    def validate_common_response(self, ctx: ValidationContext, response: dict,
                                 request: ValidationRequest) -> None:
        self.validate_transport(ctx, request)
        self.validate_conformance(ctx, response)

        if is_array(response.get("entities")):
            with ctx.push_path(".entities"):
                for i, entity in enumerate(response["entities"]):
                    if is_object(entity):
                        with ctx.push_path(f"[{i}]"):
                            self.validate_entity_basics(ctx, entity)

        if is_array(response.get("events")):
            with ctx.push_path(".events"):
                ctx.add(
                    any(
                        is_object(event) and event.get("eventAction") == LAST_UPDATE_EVENT
                        for event in response["events"]
                    ),
                    f"The 'events' property MUST contain an event with eventAction "
                    f"'{LAST_UPDATE_EVENT}'.",
                    5,
                )

    def validate_transport(self, ctx: ValidationContext, request: ValidationRequest) -> None:
        with ctx.specification(IMPLEMENTATION_GUIDE):
            if request.url is None:
                ctx.msg("No request URL available, URL scheme not checked.")
            else:
                ctx.add(
                    urlsplit(request.url).scheme.lower() == "https",
                    "RDAP service MUST be provided over HTTPS.",
                    4,
                )

            if request.metadata is None:
                ctx.msg("No HTTP response headers available, CORS header not checked.")
            else:
                ctx.add(
                    "access-control-allow-origin" in request.headers,
                    "Response MUST include the 'Access-Control-Allow-Origin' header.",
                    4,
                )

    def validate_conformance(self, ctx: ValidationContext, response: dict) -> None:
        conformance = response.get("rdapConformance")
        if not is_array(conformance):
            return

        with ctx.push_path(".rdapConformance"):
            for token in REQUIRED_CONFORMANCE:
                ctx.add(
                    token in conformance,
                    f"The 'rdapConformance' property MUST contain '{token}'.",
                    3,
                )

            for i, token in enumerate(conformance):
                # Non-string tokens are already failed by the base rules
                if not is_string(token) or token == BASE_CONFORMANCE_TOKEN:
                    continue
                with ctx.push_path(f"[{i}]"):
                    ctx.add(
                        token in RDAP_EXTENSIONS,
                        f"'{token}' MUST be a registered RDAP extension.",
                        3,
                    )

    def validate_entity_basics(self, ctx: ValidationContext, entity: dict) -> None:
        """Handle and contact-detail rules for entities of any role."""
        with ctx.push_path(".handle"):
            ctx.add("handle" in entity, "Entity MUST have the 'handle' property.", 5)

        if has_role(entity, "registrant"):
            ctx.msg("Registrant entity rules are not yet specified by the gTLD profile.")

        properties = vcard_properties(entity)
        if properties is None:
            return

        with ctx.push_path(".vcardArray"), ctx.push_path("[1]"):
            for i, prop in enumerate(properties):
                name = property_name(prop)
                if name not in ("TEL", "ADR") or len(prop) < 4:
                    continue
                with ctx.push_path(f"[{i}]"):
                    if name == "TEL":
                        self.validate_tel(ctx, prop)
                    else:
                        self.validate_adr(ctx, prop)

    def validate_tel(self, ctx: ValidationContext, prop: list) -> None:
        if not is_object(prop[1]):
            return

        key = find_key(prop[1], "type")
        value = prop[1].get(key) if key else None
        types = [value] if is_string(value) else value if is_array(value) else []

        with ctx.push_path("[1]"):
            ctx.add(
                any(is_string(t) and t in TEL_TYPES for t in types),
                "'TEL' properties MUST have a 'type' parameter of 'voice' or 'fax'.",
                6,
            )

    def validate_adr(self, ctx: ValidationContext, prop: list) -> None:
        if is_object(prop[1]):
            with ctx.push_path("[1]"):
                key = find_key(prop[1], "cc")
                if ctx.add(key is not None, "'ADR' properties MUST have a 'CC' parameter.", 6):
                    ctx.add(
                        is_string(prop[1][key]) and prop[1][key] in COUNTRY_CODES,
                        f"The 'CC' parameter ('{prop[1][key]}') MUST be a valid country code.",
                        6,
                    )

        address = prop[3]
        if is_array(address) and len(address) > ADR_COUNTRY_NAME:
            with ctx.push_path("[3]"), ctx.push_path(f"[{ADR_COUNTRY_NAME}]"):
                ctx.add(
                    address[ADR_COUNTRY_NAME] == "",
                    "The country name of an 'ADR' property MUST be empty when 'CC' is used.",
                    6,
                )

    def validate_name_properties(self, ctx: ValidationContext, record: dict,
                                 request: ValidationRequest) -> None:
        """Compare ldhName/unicodeName with the name from the request URL."""
        name = request.queried_name
        if name is None:
            ctx.msg("Queried-for name unknown, name properties not compared.")
            return

        if not is_ulabel(name):
            with ctx.push_path(".ldhName"):
                if ctx.add(
                    "ldhName" in record,
                    "Object MUST have the 'ldhName' property.",
                    7,
                ) and is_string(record["ldhName"]):
                    ctx.add(
                        record["ldhName"].lower().rstrip(".") == name.lower().rstrip("."),
                        f"The 'ldhName' property MUST match the queried-for name '{name}'.",
                        7,
                    )

            has_a_label = any(label.startswith("xn--") for label in name.lower().split("."))
            if has_a_label and "unicodeName" in record:
                with ctx.push_path(".unicodeName"):
                    ctx.add(
                        compare_unicode(record["unicodeName"], name),
                        f"The 'unicodeName' property MUST be the U-label form of '{name}'.",
                        7,
                    )
        else:
            with ctx.push_path(".unicodeName"):
                if ctx.add(
                    "unicodeName" in record,
                    "Object MUST have the 'unicodeName' property.",
                    7,
                ) and is_string(record["unicodeName"]):
                    ctx.add(
                        record["unicodeName"].lower().rstrip(".") == name.lower().rstrip("."),
                        f"The 'unicodeName' property MUST match the queried-for name '{name}'.",
                        7,
                    )

            if "ldhName" in record:
                with ctx.push_path(".ldhName"):
                    ctx.add(
                        compare_unicode(name, record["ldhName"]),
                        f"The 'ldhName' property MUST be the A-label form of '{name}'.",
                        7,
                    )

    # Registrar entity

    def validate_registrar_entity(self, ctx: ValidationContext, registrar: dict) -> None:
        """Rules for the registrar entity embedded in domains and nameservers."""
        ctx.msg("validating registrar entity...")

        with ctx.push_path(".handle"):
            ctx.add("handle" in registrar, "Registrar entity MUST have the 'handle' property.", 9)

        self.validate_registrar_id(ctx, registrar)
        self.validate_abuse_contact(ctx, registrar)

        with ctx.push_path(".links"):
            if ctx.add(
                "links" in registrar,
                "Registrar entity MUST have the 'links' property.",
                9,
            ) and is_array(registrar["links"]):
                ctx.add(
                    len(registrar["links"]) > 0,
                    "The 'links' property of the registrar entity MUST contain at least one link.",
                    9,
                )

    def validate_registrar_id(self, ctx: ValidationContext, registrar: dict) -> None:
        with ctx.push_path(".publicIds"):
            if not ctx.add(
                "publicIds" in registrar,
                "Registrar entity MUST have the 'publicIds' property.",
                9,
            ) or not is_array(registrar["publicIds"]):
                return

            matches = [
                (i, public_id) for i, public_id in enumerate(registrar["publicIds"])
                if is_object(public_id) and public_id.get("type") == IANA_REGISTRAR_ID
            ]
            if not ctx.add(
                len(matches) == 1,
                f"The 'publicIds' property MUST contain exactly one object with type "
                f"'{IANA_REGISTRAR_ID}'.",
                9,
            ):
                return

            index, public_id = matches[0]
            with ctx.push_path(f"[{index}]"), ctx.push_path(".identifier"):
                identifier = public_id.get("identifier")
                if ctx.add(
                    is_integer_string(identifier),
                    "The 'identifier' property MUST be a string containing an integer.",
                    9,
                ):
                    handle = registrar.get("handle")
                    ctx.add(
                        is_integer_string(handle) and int(handle) == int(identifier),
                        f"The registrar's 'handle' property MUST be equal to its "
                        f"{IANA_REGISTRAR_ID} ({identifier}).",
                        9,
                    )

        ctx.msg(f"The {IANA_REGISTRAR_ID} is not checked against {REGISTRAR_IDS_URL}.")

    def validate_abuse_contact(self, ctx: ValidationContext, registrar: dict) -> None:
        entities = registrar.get("entities")
        entities = entities if is_array(entities) else []
        abuse = next((i for i, e in enumerate(entities) if has_role(e, "abuse")), None)

        with ctx.push_path(".entities"):
            if not ctx.add(
                abuse is not None,
                "Registrar entity MUST have an entity with the 'abuse' role.",
                10,
            ):
                return

            with ctx.push_path(f"[{abuse}]"), ctx.push_path(".vcardArray"):
                names = {property_name(p) for p in vcard_properties(entities[abuse]) or []}
                for required in ABUSE_CONTACT_PROPERTIES:
                    ctx.add(
                        required in names,
                        f"Abuse contact MUST have a '{required}' property.",
                        10,
                    )

    # Response types

    def validate_domain(self, ctx: ValidationContext, domain: dict,
                        request: ValidationRequest) -> None:
        self.validate_common_response(ctx, domain, request)

        with ctx.push_path(".handle"):
            ctx.add("handle" in domain, "Domain object MUST have the 'handle' property.", 7)

        self.validate_name_properties(ctx, domain, request)

        with ctx.push_path(".entities"):
            if ctx.add(
                "entities" in domain,
                "Domain object MUST have the 'entities' property.",
                9,
            ) and is_array(domain["entities"]):
                registrars = [
                    i for i, entity in enumerate(domain["entities"]) if has_role(entity, "registrar")
                ]
                if ctx.add(
                    len(registrars) > 0,
                    "Domain object MUST have an entity with the 'registrar' role.",
                    9,
                ):
                    for i in registrars:
                        with ctx.push_path(f"[{i}]"):
                            self.validate_registrar_entity(ctx, domain["entities"][i])

        with ctx.push_path(".events"):
            events = domain.get("events")
            actions = {
                event.get("eventAction") for event in (events if is_array(events) else [])
                if is_object(event) and is_string(event.get("eventAction"))
            }
            for action in DOMAIN_EVENTS:
                ctx.add(
                    action in actions,
                    f"The 'events' property MUST contain an event with eventAction '{action}'.",
                    8,
                )

        with ctx.push_path(".status"):
            ctx.add("status" in domain, "Domain object MUST have the 'status' property.", 8)

        self.validate_domain_notices(ctx, domain)

        with ctx.push_path(".nameservers"):
            ctx.add(
                "nameservers" in domain,
                "Domain object MUST have the 'nameservers' property.",
                11,
            )

        with ctx.push_path(".secureDNS"):
            if ctx.add(
                "secureDNS" in domain,
                "Domain object MUST have the 'secureDNS' property.",
                11,
            ) and is_object(domain["secureDNS"]):
                self.validate_secure_dns(ctx, domain["secureDNS"])

    def validate_domain_notices(self, ctx: ValidationContext, domain: dict) -> None:
        with ctx.push_path(".notices"):
            if not ctx.add(
                "notices" in domain,
                "Domain response MUST have the 'notices' property.",
                12,
            ) or not is_array(domain["notices"]):
                return

            for title, rel, href in REQUIRED_DOMAIN_NOTICES:
                count = sum(notice_matches(n, title, rel, href) for n in domain["notices"])
                ctx.add(
                    count == 1,
                    f"The 'notices' property MUST contain exactly one '{title}' notice "
                    f"linking to {href} (found {count}).",
                    12,
                )

    def validate_secure_dns(self, ctx: ValidationContext, secure_dns: dict) -> None:
        with ctx.push_path(".delegationSigned"):
            if ctx.add(
                "delegationSigned" in secure_dns,
                "The 'secureDNS' property MUST have the 'delegationSigned' property.",
                11,
            ) and secure_dns["delegationSigned"] is True:
                ctx.add(
                    "dsData" in secure_dns or "keyData" in secure_dns,
                    "A signed delegation MUST include 'dsData' or 'keyData'.",
                    11,
                )

    def validate_help(self, ctx: ValidationContext, response: dict,
                      request: ValidationRequest) -> None:
        self.validate_common_response(ctx, response, request)

    def validate_error(self, ctx: ValidationContext, response: dict,
                       request: ValidationRequest) -> None:
        self.validate_transport(ctx, request)
        ctx.msg("Error response rules are not yet specified by the gTLD profile.")


class GTLDRegistryProfile(GTLDProfile):
    """Profile for gTLD registry RDAP services."""

    def __init__(self):
        super().__init__()
        self.handlers.update({
            ResponseType.NAMESERVER: self.validate_nameserver,
            ResponseType.ENTITY: self.validate_entity,
        })

    @property
    def name(self) -> str:
        return "gTLD registry"

    @property
    def server_types(self) -> frozenset[ServerType]:
        return frozenset({ServerType.GTLD_REGISTRY})

    def validate_nameserver(self, ctx: ValidationContext, nameserver: dict,
                            request: ValidationRequest) -> None:
        self.validate_common_response(ctx, nameserver, request)

        with ctx.push_path(".handle"):
            ctx.add("handle" in nameserver, "Nameserver object MUST have the 'handle' property.", 13)

        self.validate_name_properties(ctx, nameserver, request)

        if is_array(nameserver.get("entities")):
            with ctx.push_path(".entities"):
                for i, entity in enumerate(nameserver["entities"]):
                    if has_role(entity, "registrar"):
                        with ctx.push_path(f"[{i}]"):
                            self.validate_registrar_entity(ctx, entity)

    def validate_entity(self, ctx: ValidationContext, entity: dict,
                        request: ValidationRequest) -> None:
        """Registrar entity lookups must carry a complete contact card."""
        self.validate_common_response(ctx, entity, request)

        if is_array(entity.get("roles")):
            with ctx.push_path(".roles"):
                ctx.add(
                    "registrar" in entity["roles"],
                    "Entity MUST have the 'registrar' role.",
                    14,
                )

        with ctx.push_path(".vcardArray"):
            properties = vcard_properties(entity)
            if not ctx.add(
                properties is not None,
                "Registrar entity MUST have a 'vcardArray' property.",
                14,
            ):
                return

            with ctx.push_path("[1]"):
                for i, prop in enumerate(properties):
                    if property_name(prop) == "ADR" and len(prop) > 3:
                        with ctx.push_path(f"[{i}]"), ctx.push_path("[3]"):
                            self.validate_registrar_address(ctx, prop[3])

                names = {property_name(p) for p in properties}
                for required in REGISTRAR_CONTACT_PROPERTIES:
                    ctx.add(
                        required in names,
                        f"Registrar entity MUST have a '{required}' property.",
                        14,
                    )

    def validate_registrar_address(self, ctx: ValidationContext, address: Any) -> None:
        if not is_array(address) or len(address) <= ADR_LOCALITY:
            return

        with ctx.push_path(f"[{ADR_STREET}]"):
            ctx.add(
                _is_non_empty_text(address[ADR_STREET]),
                "The street address of a registrar 'ADR' property MUST NOT be empty.",
                14,
            )
        with ctx.push_path(f"[{ADR_LOCALITY}]"):
            ctx.add(
                _is_non_empty_text(address[ADR_LOCALITY]),
                "The locality of a registrar 'ADR' property MUST NOT be empty.",
                14,
            )


class GTLDRegistrarProfile(GTLDProfile):
    """Profile for gTLD registrar RDAP services."""

    @property
    def name(self) -> str:
        return "gTLD registrar"

    @property
    def server_types(self) -> frozenset[ServerType]:
        return frozenset({ServerType.GTLD_REGISTRAR})

    def validate_domain(self, ctx: ValidationContext, domain: dict,
                        request: ValidationRequest) -> None:
        super().validate_domain(ctx, domain, request)

        entities = domain.get("entities")
        if is_array(entities):
            with ctx.push_path(".entities"):
                ctx.add(
                    any(has_role(entity, "registrant") for entity in entities),
                    "Registrar domain response MUST have an entity with the 'registrant' role.",
                    9,
                )

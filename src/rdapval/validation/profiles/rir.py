"""NRO RDAP profile overlay for Regional Internet Registries."""

import logging
from typing import Any

from ...models import ResponseType, ServerType, ValidationRequest
from ..context import ValidationContext
from ..predicates import is_array, is_integer, is_object, is_string
from .base import ProfileRule

logger = logging.getLogger(__name__)

REQUIRED_CONFORMANCE = ("nro_rdap_profile_0", "cidr0")
REQUIRED_NOTICE_RELS = ("terms-of-service", "inaccuracy-report")

# cidr0 prefix key -> maximum prefix length
CIDR0_PREFIXES = {"v4prefix": 32, "v6prefix": 128}

NAMED_OBJECT_TYPES = (ResponseType.DOMAIN, ResponseType.NAMESERVER)


class RIRProfile(ProfileRule):
    """Rules of the NRO RDAP profile, applied to every RIR response."""

    specification = "nro"

    def __init__(self):
        super().__init__()
        self.handlers = {response_type: self.validate_response for response_type in ResponseType}

    @property
    def name(self) -> str:
        return "NRO"

    @property
    def server_types(self) -> frozenset[ServerType]:
        return frozenset({ServerType.RIR})

    def validate_response(self, ctx: ValidationContext, response: dict,
                          request: ValidationRequest) -> None:
        self.validate_conformance(ctx, response)
        self.validate_notices(ctx, response)

        response_type = request.response_type
        if response_type.is_object:
            self.validate_self_link(ctx, response)
        if response_type in NAMED_OBJECT_TYPES:
            self.validate_names(ctx, response)
        if response_type == ResponseType.IP_NETWORK:
            self.validate_cidr0(ctx, response)

        if response_type in (ResponseType.DOMAIN_SEARCH, ResponseType.NAMESERVER_SEARCH):
            results_key = f"{response_type.value.split('-')[0]}SearchResults"
            if is_array(response.get(results_key)):
                with ctx.push_path(f".{results_key}"):
                    for i, item in enumerate(response[results_key]):
                        if is_object(item):
                            with ctx.push_path(f"[{i}]"):
                                self.validate_names(ctx, item)

    def validate_conformance(self, ctx: ValidationContext, response: dict) -> None:
        conformance = response.get("rdapConformance")
        if not is_array(conformance):
            return

        with ctx.push_path(".rdapConformance"):
            for token in REQUIRED_CONFORMANCE:
                ctx.add(
                    token in conformance,
                    f"The 'rdapConformance' property MUST contain '{token}'.",
                )

    def validate_notices(self, ctx: ValidationContext, response: dict) -> None:
        notices = response.get("notices")
        rels = set()
        for notice in notices if is_array(notices) else []:
            links = notice.get("links") if is_object(notice) else None
            for link in links if is_array(links) else []:
                if is_object(link) and is_string(link.get("rel")):
                    rels.add(link["rel"])

        with ctx.push_path(".notices"):
            for rel in REQUIRED_NOTICE_RELS:
                ctx.add(
                    rel in rels,
                    f"The 'notices' property MUST contain a notice with a '{rel}' link.",
                )

    def validate_self_link(self, ctx: ValidationContext, record: dict) -> None:
        links = record.get("links")
        count = sum(
            1 for link in (links if is_array(links) else [])
            if is_object(link) and link.get("rel") == "self"
        )
        with ctx.push_path(".links"):
            ctx.add(
                count == 1,
                f"The 'links' property MUST contain exactly one 'self' link (found {count}).",
            )

    def validate_names(self, ctx: ValidationContext, record: dict) -> None:
        for key in ("ldhName", "unicodeName"):
            if is_string(record.get(key)):
                with ctx.push_path(f".{key}"):
                    ctx.add(
                        not record[key].endswith("."),
                        f"The '{key}' property MUST NOT end with a trailing dot.",
                    )

    def validate_cidr0(self, ctx: ValidationContext, network: dict) -> None:
        if "cidr0_cidrs" not in network:
            return

        with ctx.push_path(".cidr0_cidrs"):
            if ctx.add(
                is_array(network["cidr0_cidrs"]),
                "The 'cidr0_cidrs' property MUST be an array.",
            ):
                ctx.iterate(network["cidr0_cidrs"], lambda cidr: self.validate_cidr(ctx, cidr))

    def validate_cidr(self, ctx: ValidationContext, cidr: Any) -> None:
        if not ctx.add(is_object(cidr), "cidr0 entry MUST be an object."):
            return

        prefixes = [key for key in CIDR0_PREFIXES if key in cidr]
        if not ctx.add(
            len(prefixes) == 1,
            "cidr0 entry MUST have exactly one of 'v4prefix' or 'v6prefix'.",
        ):
            return

        key = prefixes[0]
        with ctx.push_path(f".{key}"):
            ctx.add(is_string(cidr[key]), f"The '{key}' property MUST be a string.")

        with ctx.push_path(".length"):
            length = cidr.get("length")
            ctx.add(
                is_integer(length) and 0 <= length <= CIDR0_PREFIXES[key],
                f"The 'length' property MUST be an integer between 0 and {CIDR0_PREFIXES[key]}.",
            )

"""Top-level response validation: protocol, envelope and non-object responses."""

import logging
from typing import Any

from ..constants import BASE_CONFORMANCE_TOKEN, RDAP_MEDIA_TYPE
from .context import ValidationContext
from .objects import (
    OBJECT_VALIDATORS,
    validate_common_object_properties,
    validate_notice_or_remark,
)
from .predicates import is_array, is_integer, is_string

logger = logging.getLogger(__name__)

# Search response type -> (results property, object class)
SEARCH_RESULTS: dict[str, tuple[str, str]] = {
    "domain-search": ("domainSearchResults", "domain"),
    "nameserver-search": ("nameserverSearchResults", "nameserver"),
    "entity-search": ("entitySearchResults", "entity"),
}


def validate_protocol(ctx: ValidationContext, status_code: int, headers: dict[str, str],
                      is_error: bool) -> bool:
    """Check the HTTP status code and media type of a response.

    Returns:
        False if the response should not be validated any further
    """
    with ctx.specification("rfc7480"):
        if is_error:
            passed = ctx.add(
                status_code >= 400,
                f"HTTP status {status_code} MUST be 400 or higher.",
                "section-5.3",
            )
        else:
            passed = ctx.add(
                status_code < 400,
                f"HTTP status {status_code} MUST be less than 400.",
                "section-5.1",
            )
        if not passed:
            return False

        content_type = headers.get("content-type", "")
        return ctx.add(
            content_type.lower().startswith(RDAP_MEDIA_TYPE),
            f"Media type '{content_type}' MUST be {RDAP_MEDIA_TYPE}.",
            "section-4.2",
        )


def validate_rdap_conformance(ctx: ValidationContext, record: dict) -> None:
    with ctx.specification("rfc9083"), ctx.push_path(".rdapConformance"):
        if not ctx.add(
            "rdapConformance" in record,
            "Record MUST have the 'rdapConformance' property.",
            "section-4.1",
        ):
            return

        conformance = record["rdapConformance"]
        if not ctx.add(
            is_array(conformance),
            "The 'rdapConformance' property MUST be an array.",
            "section-4.1",
        ):
            return

        ctx.add(
            BASE_CONFORMANCE_TOKEN in conformance,
            f"The 'rdapConformance' property MUST contain '{BASE_CONFORMANCE_TOKEN}'.",
            "section-4.1",
        )

        ctx.iterate(
            conformance,
            lambda token: ctx.add(
                is_string(token),
                "Values in the 'rdapConformance' property MUST be strings.",
                "section-4.1",
            ),
        )


def validate_notices(ctx: ValidationContext, notices: Any) -> None:
    with ctx.specification("rfc9083"), ctx.push_path(".notices"):
        if ctx.add(is_array(notices), "The 'notices' property MUST be an array.", "section-4.3"):
            ctx.iterate(notices, lambda notice: validate_notice_or_remark(ctx, notice))


def validate_help(ctx: ValidationContext, response: dict) -> None:
    """Help responses carry their content in a non-empty 'notices' array."""
    ctx.msg("validating help response...")

    with ctx.specification("rfc9083"), ctx.push_path(".notices"):
        if not ctx.add(
            "notices" in response,
            "Help response MUST have a 'notices' property.",
            "section-7",
        ):
            return

        if is_array(response["notices"]):
            ctx.add(
                len(response["notices"]) > 0,
                "The 'notices' property MUST contain at least one item.",
                "section-7",
            )


def validate_search(ctx: ValidationContext, response: dict, response_type: str) -> None:
    results_key, object_class = SEARCH_RESULTS[response_type]
    validator = OBJECT_VALIDATORS[object_class]

    ctx.msg(f"validating {object_class} search response...")

    with ctx.specification("rfc9083"):
        validate_common_object_properties(ctx, response)

        with ctx.push_path(f".{results_key}"):
            if (
                ctx.add(
                    results_key in response,
                    f"Search result MUST have the '{results_key}' property.",
                    "section-8",
                )
                and ctx.add(
                    is_array(response[results_key]),
                    f"The '{results_key}' property MUST be an array.",
                    "section-8",
                )
            ):
                ctx.iterate(response[results_key], lambda item: validator(ctx, item))


def validate_domain_search(ctx: ValidationContext, response: dict) -> None:
    validate_search(ctx, response, "domain-search")


def validate_nameserver_search(ctx: ValidationContext, response: dict) -> None:
    validate_search(ctx, response, "nameserver-search")


def validate_entity_search(ctx: ValidationContext, response: dict) -> None:
    validate_search(ctx, response, "entity-search")


def validate_error(ctx: ValidationContext, response: dict) -> None:
    ctx.msg("validating error response...")

    with ctx.specification("rfc9083"):
        with ctx.push_path(".errorCode"):
            if ctx.add(
                "errorCode" in response,
                "Error object MUST have an 'errorCode' property.",
                "section-6",
            ):
                ctx.add(
                    is_integer(response["errorCode"]),
                    "The 'errorCode' property MUST be an integer.",
                    "section-6",
                )

        if "title" in response:
            with ctx.push_path(".title"):
                ctx.add(is_string(response["title"]), "The 'title' property MUST be a string.", "section-6")

        if "description" in response:
            with ctx.push_path(".description"):
                description = response["description"]
                ctx.add(
                    is_array(description) and all(is_string(line) for line in description),
                    "The 'description' property MUST be an array of strings.",
                    "section-6",
                )

        if "notices" in response:
            with ctx.push_path(".notices"):
                if is_array(response["notices"]):
                    ctx.add(
                        len(response["notices"]) > 0,
                        "The 'notices' property MUST contain at least one item.",
                        "section-6",
                    )

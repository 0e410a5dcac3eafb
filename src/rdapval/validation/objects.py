"""Validators for RDAP object classes and their shared properties.

Each validator takes the run's ValidationContext and the untyped JSON value
at the current path. Structural failures abort the dependent subtree only;
value failures are recorded and validation continues.
"""

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import urljoin, urlsplit

from ..constants import OBJECT_TYPES, RDAP_VALUES
from .context import ValidationContext
from .jcard import validate_jcard
from .predicates import (
    compare_unicode,
    is_array,
    is_boolean,
    is_country_code_format,
    is_integer,
    is_ipv4_like,
    is_ipv6_like,
    is_iso8601_datetime,
    is_object,
    is_string,
)
from .references import OBJECT_CLASS_NAME_REFERENCES

logger = logging.getLogger(__name__)

Validator = Callable[[ValidationContext, Any], None]


def validate_object_class_name(ctx: ValidationContext, record: dict, object_class: str) -> None:
    """Check that ``record`` declares ``object_class`` as its objectClassName."""
    if object_class not in OBJECT_TYPES:
        return

    with ctx.specification("rfc9083"), ctx.push_path(".objectClassName"):
        if (
            ctx.add(
                "objectClassName" in record,
                "Object MUST have the 'objectClassName' property.",
                "section-4.9",
            )
            and ctx.add(
                is_string(record["objectClassName"]),
                "The 'objectClassName' property MUST be a string.",
                "section-4.9",
            )
        ):
            ctx.add(
                object_class == record["objectClassName"],
                f"The value of the 'objectClassName' property ('{record['objectClassName']}') "
                f"MUST be '{object_class}'.",
                OBJECT_CLASS_NAME_REFERENCES[object_class],
            )


def _check_optional_string(ctx: ValidationContext, record: dict, key: str,
                           fragment: str | None = None, noun: str = "") -> None:
    if key in record:
        with ctx.push_path(f".{key}"):
            ctx.add(
                is_string(record[key]),
                f"{noun}'{key}' property MUST be a string." if noun else
                f"The '{key}' property MUST be a string.",
                fragment,
            )


def _check_array(ctx: ValidationContext, value: Any, key: str, fragment: str | None = None) -> bool:
    return ctx.add(
        is_array(value),
        f"The '{key}' property MUST be an array.",
        fragment,
    )


# Common object properties

def validate_handle(ctx: ValidationContext, handle: Any) -> None:
    ctx.add(is_string(handle), "The 'handle' property MUST be a string.", "section-3")


def validate_links(ctx: ValidationContext, links: Any) -> None:
    if not _check_array(ctx, links, "links", "section-4.2"):
        return
    ctx.iterate(links, lambda link: validate_link(ctx, link))


def validate_remarks(ctx: ValidationContext, remarks: Any) -> None:
    if not _check_array(ctx, remarks, "remarks", "section-4.3"):
        return
    ctx.iterate(remarks, lambda remark: validate_notice_or_remark(ctx, remark))


def validate_lang(ctx: ValidationContext, lang: Any) -> None:
    ctx.add(is_string(lang), "The 'lang' property MUST be a string.", "section-4.4")


def validate_entities(ctx: ValidationContext, entities: Any) -> None:
    if not _check_array(ctx, entities, "entities", "section-5.3"):
        return
    ctx.iterate(entities, lambda entity: validate_entity(ctx, entity))


def validate_events(ctx: ValidationContext, events: Any) -> None:
    if not _check_array(ctx, events, "events", "section-4.5"):
        return
    ctx.iterate(events, lambda event: validate_event(ctx, event))


def validate_status(ctx: ValidationContext, status: Any) -> None:
    if not _check_array(ctx, status, "status", "section-4.6"):
        return
    ctx.iterate(
        status,
        lambda s: ctx.add(
            is_string(s) and s in RDAP_VALUES["status"],
            f"Status '{s}' MUST be a valid status.",
            "section-10.2.2",
        ),
    )


def validate_port43(ctx: ValidationContext, port43: Any) -> None:
    ctx.add(is_string(port43), "The 'port43' property MUST be a string.", "section-4.7")


def validate_public_ids(ctx: ValidationContext, public_ids: Any) -> None:
    if not _check_array(ctx, public_ids, "publicIds", "section-4.8"):
        return
    ctx.iterate(public_ids, lambda public_id: validate_public_id(ctx, public_id))


def validate_ldh_name(ctx: ValidationContext, ldh_name: Any) -> None:
    ctx.add(is_string(ldh_name), "The 'ldhName' property MUST be a string.", "section-3")


def validate_unicode_name(ctx: ValidationContext, unicode_name: Any) -> None:
    ctx.add(is_string(unicode_name), "The 'unicodeName' property MUST be a string.", "section-3")


# Applied in this order to whichever properties are present on a record
COMMON_PROPERTY_VALIDATORS: dict[str, Validator] = {
    "handle": validate_handle,
    "links": validate_links,
    "remarks": validate_remarks,
    "lang": validate_lang,
    "entities": validate_entities,
    "events": validate_events,
    "status": validate_status,
    "port43": validate_port43,
    "publicIds": validate_public_ids,
    "ldhName": validate_ldh_name,
    "unicodeName": validate_unicode_name,
}


def validate_common_object_properties(ctx: ValidationContext, record: dict,
                                      object_class: str | None = None) -> None:
    """Validate the properties shared by all object classes."""
    if object_class is not None:
        validate_object_class_name(ctx, record, object_class)

    with ctx.specification("rfc9083"):
        for name, validator in COMMON_PROPERTY_VALIDATORS.items():
            if name in record:
                with ctx.push_path(f".{name}"):
                    validator(ctx, record[name])


# Nested structures

def validate_link(ctx: ValidationContext, link: Any) -> None:
    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(link), "Link MUST be an object.", "section-4.2"):
            return

        for key in ("value", "rel", "href"):
            with ctx.push_path(f".{key}"):
                if ctx.add(key in link, f"Link MUST have the '{key}' property.", "section-4.2"):
                    ctx.add(
                        is_string(link[key]),
                        f"Link '{key}' property MUST be a string.",
                        "section-4.2",
                    )

        if "hreflang" in link:
            with ctx.push_path(".hreflang"):
                hreflang = link["hreflang"]
                ctx.add(
                    is_string(hreflang) or (is_array(hreflang) and all(is_string(h) for h in hreflang)),
                    "Link 'hreflang' property MUST be a string or an array of strings.",
                    "section-4.2",
                )

        for key in ("title", "media", "type"):
            _check_optional_string(ctx, link, key, "section-4.2", noun="Link ")

        if is_string(link.get("value")) and is_string(link.get("href")):
            value_url = _resolve_url(link["value"], ctx.base_url, require_host=True)

            with ctx.push_path(".value"):
                ctx.add(
                    value_url is not None,
                    "The 'value' property MUST be a valid URL.",
                    "section-4.2",
                )

            with ctx.push_path(".href"):
                ctx.add(
                    _resolve_url(link["href"], value_url or ctx.base_url) is not None,
                    "The 'href' property MUST be a valid URL.",
                    "section-4.2",
                )


def _resolve_url(url: str, base: str | None, require_host: bool = False) -> str | None:
    """Resolve ``url`` against ``base``; None if the result is not absolute."""
    if any(ch.isspace() for ch in url):
        return None
    try:
        resolved = urljoin(base, url) if base else url
        parts = urlsplit(resolved)
    except ValueError:
        return None

    if not parts.scheme:
        return None
    if require_host and parts.scheme in ("http", "https") and not parts.netloc:
        return None
    return resolved


def validate_notice_or_remark(ctx: ValidationContext, item: Any) -> None:
    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(item), "Notice/remark MUST be an object.", "section-4.3"):
            return

        _check_optional_string(ctx, item, "title", "section-4.3")

        with ctx.push_path(".description"):
            if (
                ctx.add(
                    "description" in item,
                    "Notice/remark MUST have the 'description' property.",
                    "section-4.3",
                )
                and ctx.add(
                    is_array(item["description"]),
                    "The 'description' property MUST be an array.",
                    "section-4.3",
                )
            ):
                ctx.add(
                    all(is_string(line) for line in item["description"]),
                    "The 'description' property MUST contain only strings.",
                    "section-4.3",
                )

        if "type" in item:
            with ctx.push_path(".type"):
                if ctx.add(
                    is_string(item["type"]),
                    "The 'type' property MUST be a string.",
                    "section-4.3",
                ):
                    ctx.add(
                        item["type"] in RDAP_VALUES["noticeAndRemarkType"],
                        f"The value of the 'type' property ('{item['type']}') MUST be a valid JSON value.",
                        "section-10.2.1",
                    )

        validate_common_object_properties(ctx, item)


def validate_event(ctx: ValidationContext, event: Any) -> None:
    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(event), "Event MUST be an object.", "section-4.5"):
            return

        for key in ("eventAction", "eventDate"):
            with ctx.push_path(f".{key}"):
                if not (
                    ctx.add(key in event, f"Event MUST have the '{key}' property.", "section-4.5")
                    and ctx.add(is_string(event[key]), f"The '{key}' property MUST be a string.", "section-4.5")
                ):
                    continue

                if key == "eventAction":
                    ctx.add(
                        event[key] in RDAP_VALUES["eventAction"],
                        f"The 'eventAction' property ('{event[key]}') MUST be a valid JSON value.",
                        "section-10.2.3",
                    )
                else:
                    ctx.add(
                        is_iso8601_datetime(event[key]),
                        f"The 'eventDate' property ('{event[key]}') MUST be a valid date/time.",
                        "section-4.5",
                    )

        _check_optional_string(ctx, event, "eventActor", "section-4.5")

        validate_common_object_properties(ctx, event)


def validate_public_id(ctx: ValidationContext, public_id: Any) -> None:
    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(public_id), "Public ID MUST be an object.", "section-4.8"):
            return

        for key in ("type", "identifier"):
            with ctx.push_path(f".{key}"):
                if ctx.add(key in public_id, f"Public ID MUST have the '{key}' property.", "section-4.8"):
                    ctx.add(
                        is_string(public_id[key]),
                        f"The '{key}' property MUST be a string.",
                        "section-4.8",
                    )


# Object classes

def validate_domain(ctx: ValidationContext, domain: Any, check_class_name: bool = True) -> None:
    ctx.msg("validating domain object...")

    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(domain), "Domain MUST be an object.", "section-5.3"):
            return

        validate_common_object_properties(ctx, domain, "domain" if check_class_name else None)

        if "unicodeName" in domain and "ldhName" in domain:
            with ctx.push_path(".unicodeName"):
                ctx.add(
                    compare_unicode(domain["unicodeName"], domain["ldhName"]),
                    f"The 'unicodeName' property '{domain['unicodeName']}' MUST match "
                    f"the 'ldhName' property '{domain['ldhName']}'.",
                    "section-3",
                )

        if "nameservers" in domain:
            with ctx.push_path(".nameservers"):
                if _check_array(ctx, domain["nameservers"], "nameservers", "section-5.3"):
                    ctx.iterate(domain["nameservers"], lambda ns: validate_nameserver(ctx, ns))

        if "secureDNS" in domain:
            with ctx.push_path(".secureDNS"):
                validate_secure_dns(ctx, domain["secureDNS"])


def validate_secure_dns(ctx: ValidationContext, secure_dns: Any) -> None:
    ctx.msg("validating 'secureDNS' object...")

    if not ctx.add(is_object(secure_dns), "The 'secureDNS' property MUST be an object.", "section-5.3"):
        return

    for key in ("zoneSigned", "delegationSigned"):
        if key in secure_dns:
            with ctx.push_path(f".{key}"):
                ctx.add(
                    is_boolean(secure_dns[key]),
                    f"The '{key}' property MUST be a boolean.",
                    "section-5.3",
                )

    if "maxSigLife" in secure_dns:
        with ctx.push_path(".maxSigLife"):
            ctx.add(
                is_integer(secure_dns["maxSigLife"]),
                "The 'maxSigLife' property MUST be an integer.",
                "section-5.3",
            )

    if secure_dns.get("delegationSigned") is not True:
        return

    count = 0
    for key, validator in (("dsData", validate_ds_data), ("keyData", validate_key_data)):
        if key not in secure_dns:
            continue

        with ctx.push_path(f".{key}"):
            if _check_array(ctx, secure_dns[key], key, "section-5.3"):
                count += len(secure_dns[key])
                ctx.iterate(secure_dns[key], lambda v, validator=validator: validator(ctx, v))

    ctx.add(
        count > 0,
        "The 'secureDNS' property for a domain where delegationSigned=true "
        "MUST contain one or more values in dsData/keyData.",
        "section-5.3",
    )


def _validate_dnssec_record(ctx: ValidationContext, record: Any, noun: str,
                            fields: tuple[str, ...], string_field: str) -> None:
    if not ctx.add(is_object(record), f"{noun} object MUST be an object.", "section-5.3"):
        return

    for key in fields:
        with ctx.push_path(f".{key}"):
            if ctx.add(key in record, f"{noun} object MUST have a '{key}' property.", "section-5.3"):
                if key == string_field:
                    ctx.add(
                        is_string(record[key]),
                        f"The '{key}' property of {noun} object MUST be a string.",
                        "section-5.3",
                    )
                else:
                    ctx.add(
                        is_integer(record[key]),
                        f"The '{key}' property of {noun} object MUST be an integer.",
                        "section-5.3",
                    )

    validate_common_object_properties(ctx, record)


def validate_ds_data(ctx: ValidationContext, ds_data: Any) -> None:
    ctx.msg("validating 'dsData' object...")
    _validate_dnssec_record(ctx, ds_data, "DS record", ("keyTag", "algorithm", "digestType", "digest"), "digest")


def validate_key_data(ctx: ValidationContext, key_data: Any) -> None:
    ctx.msg("validating 'keyData' object...")
    _validate_dnssec_record(ctx, key_data, "KeyData", ("flags", "protocol", "algorithm", "publicKey"), "publicKey")


def validate_entity(ctx: ValidationContext, entity: Any, check_class_name: bool = True) -> None:
    ctx.msg("validating entity...")

    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(entity), "Entity MUST be an object.", "section-5.1"):
            return

        validate_common_object_properties(ctx, entity, "entity" if check_class_name else None)

        with ctx.push_path(".roles"):
            if (
                ctx.add("roles" in entity, "Entity MUST have the 'roles' property.", "section-5.1")
                and _check_array(ctx, entity["roles"], "roles", "section-5.1")
            ):
                ctx.iterate(
                    entity["roles"],
                    lambda role: ctx.add(
                        is_string(role) and role in RDAP_VALUES["role"],
                        f"Role '{role}' MUST be a valid RDAP value.",
                        "section-10.2.4",
                    ),
                )

        if "vcardArray" in entity:
            with ctx.push_path(".vcardArray"):
                vcard_array = entity["vcardArray"]
                if _check_array(ctx, vcard_array, "vcardArray", "section-5.1"):
                    with ctx.push_path("[0]"):
                        ctx.add(
                            len(vcard_array) > 0 and vcard_array[0] == "vcard",
                            "The first value in the vcardArray array MUST be 'vcard'.",
                            "section-5.1",
                        )

                    with ctx.push_path("[1]"):
                        validate_jcard(ctx, vcard_array[1] if len(vcard_array) > 1 else None)

        for key in ("asEventActor", "networks", "autnums"):
            if key not in entity:
                continue

            with ctx.push_path(f".{key}"):
                if not _check_array(ctx, entity[key], key, "section-5.1"):
                    continue

                if key == "asEventActor":
                    ctx.iterate(entity[key], lambda v: validate_event(ctx, v))
                elif key == "networks":
                    ctx.iterate(entity[key], lambda v: validate_ip_network(ctx, v))
                else:
                    ctx.iterate(entity[key], lambda v: validate_autnum(ctx, v))


def validate_nameserver(ctx: ValidationContext, nameserver: Any, check_class_name: bool = True) -> None:
    ctx.msg("validating nameserver...")

    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(nameserver), "Nameserver MUST be an object.", "section-5.2"):
            return

        validate_common_object_properties(ctx, nameserver, "nameserver" if check_class_name else None)

        with ctx.push_path(".ldhName"):
            ctx.add(
                "ldhName" in nameserver,
                "Nameserver MUST have the 'ldhName' property.",
                "section-5.2",
            )

        if "ipAddresses" not in nameserver:
            return

        with ctx.push_path(".ipAddresses"):
            addresses = nameserver["ipAddresses"]
            if not ctx.add(
                is_object(addresses),
                "The 'ipAddresses' property MUST be an object.",
                "section-5.2",
            ):
                return

            for version, check in (("v4", is_ipv4_like), ("v6", is_ipv6_like)):
                if version not in addresses:
                    continue

                with ctx.push_path(f".{version}"):
                    if not ctx.add(
                        is_array(addresses[version]),
                        f"The '{version}' property of the 'ipAddresses' property MUST be an array.",
                        "section-5.2",
                    ):
                        continue

                    ctx.iterate(
                        addresses[version],
                        lambda addr, version=version, check=check: ctx.add(
                            check(addr),
                            f"The value '{addr}' MUST be a valid IP{version} address.",
                            "section-5.2",
                        ),
                    )


def validate_ip_network(ctx: ValidationContext, network: Any, check_class_name: bool = True) -> None:
    ctx.msg("validating IP network object...")

    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(network), "IP network MUST be an object.", "section-5.4"):
            return

        validate_common_object_properties(ctx, network, "ip network" if check_class_name else None)

        for key in ("startAddress", "endAddress", "ipVersion", "name", "type", "country", "parentHandle"):
            if key not in network:
                continue

            with ctx.push_path(f".{key}"):
                if not ctx.add(
                    is_string(network[key]),
                    f"The '{key}' property MUST be a string.",
                    "section-5.4",
                ):
                    continue

                if key == "ipVersion":
                    ctx.add(
                        network[key] in ("v4", "v6"),
                        "The 'ipVersion' property MUST be either 'v4' or 'v6'.",
                        "section-5.4",
                    )
                elif key == "country":
                    ctx.add(
                        is_country_code_format(network[key]),
                        "The 'country' property MUST be a 2-character country-code.",
                        "section-5.4",
                    )

        version = network.get("ipVersion")
        for key in ("startAddress", "endAddress"):
            if is_string(network.get(key)) and version in ("v4", "v6"):
                with ctx.push_path(f".{key}"):
                    check = is_ipv4_like if version == "v4" else is_ipv6_like
                    ctx.add(
                        check(network[key]),
                        f"The '{key}' property MUST be a valid IP{version} address.",
                        "section-5.4",
                    )


def validate_autnum(ctx: ValidationContext, autnum: Any, check_class_name: bool = True) -> None:
    ctx.msg("validating autnum object...")

    with ctx.specification("rfc9083"):
        if not ctx.add(is_object(autnum), "Autnum MUST be an object.", "section-5.5"):
            return

        validate_common_object_properties(ctx, autnum, "autnum" if check_class_name else None)

        for key in ("startAutnum", "endAutnum"):
            if key in autnum:
                with ctx.push_path(f".{key}"):
                    ctx.add(
                        is_integer(autnum[key]),
                        f"The '{key}' property MUST be an integer.",
                        "section-5.5",
                    )

        for key in ("name", "type", "country"):
            if key not in autnum:
                continue

            with ctx.push_path(f".{key}"):
                if ctx.add(
                    is_string(autnum[key]),
                    f"The '{key}' property MUST be a string.",
                    "section-5.5",
                ) and key == "country":
                    ctx.add(
                        is_country_code_format(autnum[key]),
                        "The 'country' property MUST be a 2-character country-code.",
                        "section-5.5",
                    )


# Object class name -> validator, used by the dispatcher and search results
OBJECT_VALIDATORS: dict[str, Callable[..., None]] = {
    "domain": validate_domain,
    "nameserver": validate_nameserver,
    "entity": validate_entity,
    "ip network": validate_ip_network,
    "autnum": validate_autnum,
}

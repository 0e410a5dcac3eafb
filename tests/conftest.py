"""Shared fixtures for rdapval tests."""

import copy

import pytest

from rdapval.models import ResponseMetadata
from rdapval.validation import RDAPValidator, ResultCollector, ValidationContext

DOMAIN_URL = "https://rdap.example.com/domain/example.com"

ABUSE_ENTITY = {
    "objectClassName": "entity",
    "roles": ["abuse"],
    "vcardArray": ["vcard", [
        ["version", {}, "text", "4.0"],
        ["fn", {}, "text", "Abuse Contact"],
        ["tel", {"type": "voice"}, "uri", "tel:+1.5555551234"],
        ["email", {}, "text", "abuse@registrar.example"],
    ]],
}

REGISTRAR_ENTITY = {
    "objectClassName": "entity",
    "handle": "292",
    "roles": ["registrar"],
    "publicIds": [{"type": "IANA Registrar ID", "identifier": "292"}],
    "vcardArray": ["vcard", [
        ["version", {}, "text", "4.0"],
        ["fn", {}, "text", "Example Registrar Inc."],
    ]],
    "links": [{
        "value": DOMAIN_URL,
        "rel": "about",
        "href": "https://registrar.example",
        "type": "text/html",
    }],
    "entities": [ABUSE_ENTITY],
}

GTLD_DOMAIN = {
    "rdapConformance": [
        "rdap_level_0",
        "icann_rdap_response_profile_1",
        "icann_rdap_technical_implementation_guide_1",
    ],
    "objectClassName": "domain",
    "handle": "2336799_DOMAIN_COM-VRSN",
    "ldhName": "example.com",
    "status": ["client transfer prohibited"],
    "links": [{
        "value": DOMAIN_URL,
        "rel": "self",
        "href": DOMAIN_URL,
        "type": "application/rdap+json",
    }],
    "events": [
        {"eventAction": "registration", "eventDate": "1995-08-14T04:00:00Z"},
        {"eventAction": "expiration", "eventDate": "2030-08-13T04:00:00Z"},
        {"eventAction": "last update of RDAP database", "eventDate": "2024-03-01T12:00:00Z"},
    ],
    "entities": [REGISTRAR_ENTITY],
    "nameservers": [{"objectClassName": "nameserver", "ldhName": "a.iana-servers.net"}],
    "secureDNS": {"delegationSigned": False},
    "notices": [
        {
            "title": "Status Codes",
            "description": ["For more information on domain status codes, please visit https://icann.org/epp"],
            "links": [{
                "value": DOMAIN_URL,
                "rel": "glossary",
                "href": "https://icann.org/epp",
                "type": "text/html",
            }],
        },
        {
            "title": "RDDS Inaccuracy Complaint Form",
            "description": ["URL of the ICANN RDDS Inaccuracy Complaint Form: https://icann.org/wicf"],
            "links": [{
                "value": DOMAIN_URL,
                "rel": "help",
                "href": "https://icann.org/wicf",
                "type": "text/html",
            }],
        },
    ],
}


@pytest.fixture
def context():
    """Fresh validation context collecting its results."""
    return ValidationContext(sink=ResultCollector())


@pytest.fixture
def minimal_domain():
    return {
        "rdapConformance": ["rdap_level_0"],
        "objectClassName": "domain",
        "ldhName": "example.com",
    }


@pytest.fixture
def gtld_domain():
    """Domain response satisfying the gTLD registry profile."""
    return copy.deepcopy(GTLD_DOMAIN)


@pytest.fixture
def rdap_metadata():
    return ResponseMetadata(
        status_code=200,
        headers={"Content-Type": "application/rdap+json", "Access-Control-Allow-Origin": "*"},
        requested_url=DOMAIN_URL,
    )


@pytest.fixture
def run():
    """Validate a document with the default profiles and return the collector."""
    def _run(document, response_type="domain", server_type="vanilla", metadata=None, url=None):
        collector = ResultCollector()
        validator = RDAPValidator(sink=collector)
        validator.create_default_profiles()
        validator.validate(document, response_type, server_type, metadata, url=url)
        return collector
    return _run

"""Tests for the gTLD registry and registrar profiles."""

import pytest

from rdapval.models import ResponseMetadata

DOMAIN_URL = "https://rdap.example.com/domain/example.com"
RDAP_HEADERS = {"Content-Type": "application/rdap+json", "Access-Control-Allow-Origin": "*"}
CONFORMANCE = [
    "rdap_level_0",
    "icann_rdap_response_profile_1",
    "icann_rdap_technical_implementation_guide_1",
]
ADDRESS = ["", "", "1 Main Street", "Los Angeles", "CA", "90001", ""]


def messages(collector):
    return [f.message for f in collector.failures]


def registrar_vcard(document):
    return document["entities"][0]["vcardArray"][1]


class TestRegistryDomain:
    """Test domain responses under the gTLD registry profile."""

    def test_conforming_domain(self, run, gtld_domain, rdap_metadata):
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        assert collector.failures == []
        assert any(
            r.message == "validating response against the gTLD registry profile..."
            for r in collector.results
        )

    def test_without_metadata(self, run, gtld_domain):
        collector = run(gtld_domain, "domain", "gtld-registry")

        assert collector.failures == []
        info = [r.message for r in collector.results]
        assert "No HTTP response headers available, CORS header not checked." in info
        assert "Queried-for name unknown, name properties not compared." in info

    def test_plain_http(self, run, gtld_domain):
        metadata = ResponseMetadata(200, RDAP_HEADERS, DOMAIN_URL.replace("https:", "http:"))
        collector = run(gtld_domain, "domain", "gtld-registry", metadata)

        (failure,) = collector.failures
        assert failure.message == "RDAP service MUST be provided over HTTPS."
        assert failure.reference.endswith("rdap-technical-implementation-guide-21feb24-en.pdf#page=4")

    def test_missing_cors_header(self, run, gtld_domain):
        metadata = ResponseMetadata(200, {"Content-Type": "application/rdap+json"}, DOMAIN_URL)
        collector = run(gtld_domain, "domain", "gtld-registry", metadata)

        assert messages(collector) == ["Response MUST include the 'Access-Control-Allow-Origin' header."]

    def test_conformance_tokens(self, run, gtld_domain, rdap_metadata):
        gtld_domain["rdapConformance"] = ["rdap_level_0", "icann_rdap_response_profile_1", "made_up_0"]
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        failures = collector.failures
        assert len(failures) == 2
        assert "icann_rdap_technical_implementation_guide_1" in failures[0].message
        assert failures[0].reference.endswith("#page=3")
        assert failures[1].path == "$.rdapConformance[2]"

    def test_duplicated_notice(self, run, gtld_domain, rdap_metadata):
        gtld_domain["notices"].append(gtld_domain["notices"][1])
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.notices"
        assert "(found 2)" in failure.message

    def test_missing_last_update_event(self, run, gtld_domain, rdap_metadata):
        gtld_domain["events"] = gtld_domain["events"][:2]
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.events"
        assert "last update of RDAP database" in failure.message

    def test_missing_expiration_event(self, run, gtld_domain, rdap_metadata):
        del gtld_domain["events"][1]
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        assert messages(collector) == [
            "The 'events' property MUST contain an event with eventAction 'expiration'."
        ]

    @pytest.mark.parametrize("member", ["handle", "status", "nameservers", "secureDNS"])
    def test_required_members(self, run, gtld_domain, rdap_metadata, member):
        del gtld_domain[member]
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == f"$.{member}"

    def test_ldh_name_must_match_query(self, run, gtld_domain, rdap_metadata):
        gtld_domain["ldhName"] = "example.net"
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.ldhName"
        assert "'example.com'" in failure.message

    def test_idn_query(self, run, gtld_domain):
        gtld_domain["ldhName"] = "xn--bcher-kva.example"
        gtld_domain["unicodeName"] = "bücher.example"
        metadata = ResponseMetadata(200, RDAP_HEADERS, "https://rdap.example.com/domain/xn--bcher-kva.example")

        assert run(gtld_domain, "domain", "gtld-registry", metadata).failures == []

        gtld_domain["unicodeName"] = "bucher.example"
        failures = run(gtld_domain, "domain", "gtld-registry", metadata).failures
        # Both the base and the profile compare the two name forms
        assert [f.path for f in failures] == ["$.unicodeName", "$.unicodeName"]

    def test_signed_delegation_without_records(self, run, gtld_domain, rdap_metadata):
        gtld_domain["secureDNS"] = {"delegationSigned": True}
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        assert "A signed delegation MUST include 'dsData' or 'keyData'." in messages(collector)


class TestRegistrarEntity:
    """Test the registrar entity embedded in domain responses."""

    def test_missing_registrar(self, run, gtld_domain, rdap_metadata):
        gtld_domain["entities"][0]["roles"] = ["technical"]
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        assert messages(collector) == ["Domain object MUST have an entity with the 'registrar' role."]

    def test_handle_must_equal_registrar_id(self, run, gtld_domain, rdap_metadata):
        gtld_domain["entities"][0]["handle"] = "293"
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.entities[0].publicIds[0].identifier"
        assert "(292)" in failure.message

    def test_registrar_id_must_be_numeric(self, run, gtld_domain, rdap_metadata):
        gtld_domain["entities"][0]["publicIds"][0]["identifier"] = "R-292"
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        assert messages(collector) == ["The 'identifier' property MUST be a string containing an integer."]

    def test_abuse_contact_needs_email(self, run, gtld_domain, rdap_metadata):
        abuse_card = gtld_domain["entities"][0]["entities"][0]["vcardArray"][1]
        abuse_card.pop()
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.entities[0].entities[0].vcardArray"
        assert failure.message == "Abuse contact MUST have a 'EMAIL' property."
        assert failure.reference.endswith("#page=10")

    def test_tel_type(self, run, gtld_domain, rdap_metadata):
        registrar_vcard(gtld_domain).append(["tel", {"type": "cell"}, "uri", "tel:+1.5555550000"])
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.entities[0].vcardArray[1][2][1]"

    def test_adr_country_code(self, run, gtld_domain, rdap_metadata):
        registrar_vcard(gtld_domain).append(["adr", {}, "text", list(ADDRESS)])
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)
        assert messages(collector) == ["'ADR' properties MUST have a 'CC' parameter."]

        registrar_vcard(gtld_domain)[-1][1] = {"cc": "US"}
        assert run(gtld_domain, "domain", "gtld-registry", rdap_metadata).failures == []

    def test_adr_country_name_must_be_empty(self, run, gtld_domain, rdap_metadata):
        address = list(ADDRESS)
        address[6] = "United States"
        registrar_vcard(gtld_domain).append(["adr", {"cc": "US"}, "text", address])
        collector = run(gtld_domain, "domain", "gtld-registry", rdap_metadata)

        (failure,) = collector.failures
        assert failure.path == "$.entities[0].vcardArray[1][2][3][6]"


class TestRegistrarDomain:
    """Test the gTLD registrar profile."""

    def test_registrant_required(self, run, gtld_domain, rdap_metadata):
        collector = run(gtld_domain, "domain", "gtld-registrar", rdap_metadata)

        assert messages(collector) == [
            "Registrar domain response MUST have an entity with the 'registrant' role."
        ]

    def test_with_registrant(self, run, gtld_domain, rdap_metadata):
        gtld_domain["entities"].append({
            "objectClassName": "entity",
            "handle": "C-1",
            "roles": ["registrant"],
        })
        collector = run(gtld_domain, "domain", "gtld-registrar", rdap_metadata)

        assert collector.failures == []
        assert any("Registrant entity rules are not yet specified" in r.message for r in collector.results)

    def test_registrar_profile_skips_entity_responses(self, run):
        entity = {"rdapConformance": CONFORMANCE, "objectClassName": "entity", "roles": ["registrar"]}
        collector = run(entity, "entity", "gtld-registrar")

        assert not any("gTLD registrar profile" in r.message for r in collector.results)


class TestRegistryObjects:
    """Test nameserver, entity, help and error responses."""

    def registrar(self):
        return {
            "rdapConformance": CONFORMANCE,
            "objectClassName": "entity",
            "handle": "292",
            "roles": ["registrar"],
            "vcardArray": ["vcard", [
                ["version", {}, "text", "4.0"],
                ["fn", {}, "text", "Example Registrar Inc."],
                ["adr", {"cc": "US"}, "text", list(ADDRESS)],
                ["tel", {"type": "voice"}, "uri", "tel:+1.5555551234"],
                ["email", {}, "text", "info@registrar.example"],
            ]],
        }

    def test_registrar_entity_response(self, run):
        assert run(self.registrar(), "entity", "gtld-registry").failures == []

    def test_registrar_entity_needs_locality(self, run):
        entity = self.registrar()
        entity["vcardArray"][1][2][3][3] = ""
        collector = run(entity, "entity", "gtld-registry")

        (failure,) = collector.failures
        assert failure.path == "$.vcardArray[1][2][3][3]"

    def test_registrar_entity_needs_email(self, run):
        entity = self.registrar()
        del entity["vcardArray"][1][4]
        collector = run(entity, "entity", "gtld-registry")

        assert messages(collector) == ["Registrar entity MUST have a 'EMAIL' property."]

    def test_nameserver_response(self, run):
        nameserver = {
            "rdapConformance": CONFORMANCE,
            "objectClassName": "nameserver",
            "ldhName": "ns1.example.com",
        }
        collector = run(nameserver, "nameserver", "gtld-registry",
                        url="https://rdap.example.com/nameserver/ns1.example.com")

        assert messages(collector) == ["Nameserver object MUST have the 'handle' property."]

    def test_help_response(self, run):
        help_response = {
            "rdapConformance": CONFORMANCE,
            "notices": [{"title": "Help", "description": ["Query the domain path."]}],
        }
        assert run(help_response, "help", "gtld-registry").failures == []

    def test_error_response(self, run):
        metadata = ResponseMetadata(404, RDAP_HEADERS, "https://rdap.example.com/domain/missing.com")
        collector = run({"rdapConformance": CONFORMANCE, "errorCode": 404}, "error", "gtld-registry", metadata)

        assert collector.failures == []
        assert any("Error response rules are not yet specified" in r.message for r in collector.results)


class TestMalformedValues:
    """Test that malformed values fail without stopping the remaining profile rules."""

    @pytest.fixture
    def domain(self, gtld_domain):
        # Removing the Status Codes notice gives a failure from the last rules to run
        del gtld_domain["notices"][0]
        return gtld_domain

    def assert_profile_completed(self, collector):
        assert not any(r.message.startswith("Internal validator error") for r in collector.results)
        assert any(
            "'Status Codes' notice" in m and "(found 0)" in m for m in messages(collector)
        )

    def test_nested_conformance_token(self, run, domain, rdap_metadata):
        domain["rdapConformance"].append(["nested"])
        collector = run(domain, "domain", "gtld-registry", rdap_metadata)

        self.assert_profile_completed(collector)
        assert [f.message for f in collector.failures if f.path == "$.rdapConformance[3]"] == [
            "Values in the 'rdapConformance' property MUST be strings."
        ]

    def test_country_code_array(self, run, domain, rdap_metadata):
        registrar_vcard(domain).append(["adr", {"cc": ["US"]}, "text", list(ADDRESS)])
        collector = run(domain, "domain", "gtld-registry", rdap_metadata)

        self.assert_profile_completed(collector)
        assert "$.entities[0].vcardArray[1][2][1]" in [f.path for f in collector.failures]

    def test_tel_type_array(self, run, domain, rdap_metadata):
        registrar_vcard(domain).append(["tel", {"type": [["voice"]]}, "uri", "tel:+1.5555550000"])
        collector = run(domain, "domain", "gtld-registry", rdap_metadata)

        self.assert_profile_completed(collector)
        assert "'TEL' properties MUST have a 'type' parameter of 'voice' or 'fax'." in messages(collector)

    def test_event_action_array(self, run, domain, rdap_metadata):
        domain["events"].append({"eventAction": ["x"], "eventDate": "2024-03-01T12:00:00Z"})
        collector = run(domain, "domain", "gtld-registry", rdap_metadata)

        self.assert_profile_completed(collector)
        assert "$.events[3].eventAction" in [f.path for f in collector.failures]

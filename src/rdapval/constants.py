"""Registries of permitted values used by the RDAP validator.

All enumerated values (RDAP JSON values, extensions, jCard elements,
country codes) centralized for easy maintenance.
"""

from typing import Dict, FrozenSet

# RDAP JSON Values Registry
# https://www.iana.org/assignments/rdap-json-values/rdap-json-values.xhtml
RDAP_VALUES: Dict[str, FrozenSet[str]] = {
    "domainVariantRelation": frozenset({
        "conjoined",
        "open registration",
        "registered",
        "registration restricted",
        "unregistered",
    }),
    "eventAction": frozenset({
        "deletion",
        "enum validation expiration",
        "expiration",
        "last changed",
        "last update of RDAP database",
        "locked",
        "registrar expiration",
        "registration",
        "reinstantiation",
        "reregistration",
        "transfer",
        "unlocked",
    }),
    "noticeAndRemarkType": frozenset({
        "object redacted due to authorization",
        "object truncated due to authorization",
        "object truncated due to excessive load",
        "object truncated due to unexplainable reasons",
        "result set truncated due to authorization",
        "result set truncated due to excessive load",
        "result set truncated due to unexplainable reasons",
    }),
    "redactedExpressionLanguage": frozenset({
        "jsonpath",
    }),
    "role": frozenset({
        "abuse",
        "administrative",
        "billing",
        "noc",
        "notifications",
        "proxy",
        "registrant",
        "registrar",
        "reseller",
        "sponsor",
        "technical",
    }),
    "status": frozenset({
        "active",
        "add period",
        "administrative",
        "associated",
        "auto renew period",
        "client delete prohibited",
        "client hold",
        "client renew prohibited",
        "client transfer prohibited",
        "client update prohibited",
        "delete prohibited",
        "inactive",
        "locked",
        "obscured",
        "pending create",
        "pending delete",
        "pending renew",
        "pending restore",
        "pending transfer",
        "pending update",
        "private",
        "proxy",
        "redemption period",
        "removed",
        "renew period",
        "renew prohibited",
        "reserved",
        "server delete prohibited",
        "server hold",
        "server renew prohibited",
        "server transfer prohibited",
        "server update prohibited",
        "transfer period",
        "transfer prohibited",
        "update prohibited",
        "validated",
    }),
}

# RDAP Extensions Registry
# https://www.iana.org/assignments/rdap-extensions/rdap-extensions.xhtml
RDAP_EXTENSIONS: FrozenSet[str] = frozenset({
    "arin_originas0",
    "artRecord",
    "cidr0",
    "farv1",
    "fred",
    "icann_rdap_response_profile_0",
    "icann_rdap_technical_implementation_guide_0",
    "icann_rdap_response_profile_1",
    "icann_rdap_technical_implementation_guide_1",
    "nro_rdap_profile_0",
    "nro_rdap_profile_asn_flat_0",
    "nro_rdap_profile_asn_hierarchical_0",
    "paging",
    "platformNS",
    "rdap_objectTag",
    "redacted",
    "redirect_with_content",
    "regType",
    "reverse_search",
    "sorting",
    "subsetting",
})

BASE_CONFORMANCE_TOKEN = "rdap_level_0"

# Permitted values of the "objectClassName" property
OBJECT_TYPES: FrozenSet[str] = frozenset({
    "domain",
    "ip network",
    "autnum",
    "nameserver",
    "entity",
})

# https://www.iana.org/assignments/vcard-elements/vcard-elements.xhtml#properties
JCARD_PROPERTY_TYPES: FrozenSet[str] = frozenset({
    "SOURCE", "KIND", "XML", "FN", "N", "NICKNAME", "PHOTO", "BDAY",
    "ANNIVERSARY", "GENDER", "ADR", "TEL", "EMAIL", "IMPP", "LANG", "TZ",
    "GEO", "TITLE", "ROLE", "LOGO", "ORG", "MEMBER", "RELATED", "CATEGORIES",
    "NOTE", "PRODID", "REV", "SOUND", "UID", "CLIENTPIDMAP", "URL",
    "VERSION", "KEY", "FBURL", "CALADRURI", "CALURI", "BIRTHPLACE",
    "DEATHPLACE", "DEATHDATE", "EXPERTISE", "HOBBY", "INTEREST",
    "ORG-DIRECTORY", "CONTACT-URI", "CREATED", "GRAMGENDER", "LANGUAGE",
    "PRONOUNS", "SOCIALPROFILE", "JSPROP",
})

# https://www.iana.org/assignments/vcard-elements/vcard-elements.xhtml#parameters
JCARD_PARAMETERS: FrozenSet[str] = frozenset({
    "LANGUAGE", "VALUE", "PREF", "ALTID", "PID", "TYPE", "MEDIATYPE",
    "CALSCALE", "SORT-AS", "GEO", "TZ", "INDEX", "LEVEL", "GROUP", "CC",
    "AUTHOR", "AUTHOR-NAME", "CREATED", "DERIVED", "LABEL", "PHONETIC",
    "PROP-ID", "SCRIPT", "SERVICE-TYPE", "USERNAME", "JSPTR",
})

# https://www.iana.org/assignments/vcard-elements/vcard-elements.xhtml#value-data-types
JCARD_VALUE_TYPES: FrozenSet[str] = frozenset({
    "BOOLEAN", "DATE", "DATE-AND-OR-TIME", "DATE-TIME", "FLOAT", "INTEGER",
    "LANGUAGE-TAG", "TEXT", "TIME", "TIMESTAMP", "UNKNOWN", "URI",
    "UTC-OFFSET",
})

# https://www.iana.org/assignments/vcard-elements/vcard-elements.xhtml#property-values
JCARD_PROPERTY_VALUES: Dict[str, FrozenSet[str]] = {
    "KIND": frozenset({
        "individual", "group", "org", "location", "application", "device",
    }),
    "VERSION": frozenset({"4.0"}),
    "GRAMGENDER": frozenset({
        "animate", "common", "feminine", "inanimate", "masculine", "neuter",
    }),
}

# Number of components in a structured ADR value (RFC 6350 section 6.3.1)
ADR_VALUE_LENGTH = 7

CONTACT_URI_SCHEMES: FrozenSet[str] = frozenset({"mailto", "http", "https"})

# Labels for the supported response types
RESPONSE_TYPES: Dict[str, str] = {
    "domain": "Domain Name",
    "ip network": "IP Network",
    "autnum": "AS Number",
    "nameserver": "Nameserver",
    "entity": "Entity",
    "help": "Help",
    "domain-search": "Domain Search",
    "nameserver-search": "Nameserver Search",
    "entity-search": "Entity Search",
    "error": "Error",
}

# Labels for the supported server types
SERVER_TYPES: Dict[str, str] = {
    "vanilla": "Vanilla (IETF STD 95)",
    "gtld-registry": "gTLD registry (February 2024 gTLD RDAP profile)",
    "gtld-registrar": "gTLD registrar (February 2024 gTLD RDAP profile)",
    "rir": "RIR (January 2021 NRO RDAP Profile)",
}

RDAP_MEDIA_TYPE = "application/rdap+json"

# https://en.wikipedia.org/wiki/ISO_3166-1_alpha-2
COUNTRY_CODES: FrozenSet[str] = frozenset({
    "AD", "AE", "AF", "AG", "AI", "AL", "AM", "AO", "AQ", "AR", "AS", "AT",
    "AU", "AW", "AX", "AZ", "BA", "BB", "BD", "BE", "BF", "BG", "BH", "BI",
    "BJ", "BL", "BM", "BN", "BO", "BQ", "BR", "BS", "BT", "BV", "BW", "BY",
    "BZ", "CA", "CC", "CD", "CF", "CG", "CH", "CI", "CK", "CL", "CM", "CN",
    "CO", "CR", "CU", "CV", "CW", "CX", "CY", "CZ", "DE", "DJ", "DK", "DM",
    "DO", "DZ", "EC", "EE", "EG", "EH", "ER", "ES", "ET", "FI", "FJ", "FK",
    "FM", "FO", "FR", "GA", "GB", "GD", "GE", "GF", "GG", "GH", "GI", "GL",
    "GM", "GN", "GP", "GQ", "GR", "GS", "GT", "GU", "GW", "GY", "HK", "HM",
    "HN", "HR", "HT", "HU", "ID", "IE", "IL", "IM", "IN", "IO", "IQ", "IR",
    "IS", "IT", "JE", "JM", "JO", "JP", "KE", "KG", "KH", "KI", "KM", "KN",
    "KP", "KR", "KW", "KY", "KZ", "LA", "LB", "LC", "LI", "LK", "LR", "LS",
    "LT", "LU", "LV", "LY", "MA", "MC", "MD", "ME", "MF", "MG", "MH", "MK",
    "ML", "MM", "MN", "MO", "MP", "MQ", "MR", "MS", "MT", "MU", "MV", "MW",
    "MX", "MY", "MZ", "NA", "NC", "NE", "NF", "NG", "NI", "NL", "NO", "NP",
    "NR", "NU", "NZ", "OM", "PA", "PE", "PF", "PG", "PH", "PK", "PL", "PM",
    "PN", "PR", "PS", "PT", "PW", "PY", "QA", "RE", "RO", "RS", "RU", "RW",
    "SA", "SB", "SC", "SD", "SE", "SG", "SH", "SI", "SJ", "SK", "SL", "SM",
    "SN", "SO", "SR", "SS", "ST", "SV", "SX", "SY", "SZ", "TC", "TD", "TF",
    "TG", "TH", "TJ", "TK", "TL", "TM", "TN", "TO", "TR", "TT", "TV", "TW",
    "TZ", "UA", "UG", "UM", "US", "UY", "UZ", "VA", "VC", "VE", "VG", "VI",
    "VN", "VU", "WF", "WS", "YE", "YT", "ZA", "ZM", "ZW",
})

# Where the specifications cited by results are published
DEFAULT_REFERENCE_BASE = "https://validator.rdap.org/specs/"

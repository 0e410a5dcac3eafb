"""RDAP validation entry point.

RDAPValidator checks the declared response and server types, runs the
protocol checks when HTTP metadata is available, validates the top-level
envelope, dispatches to the validator for the response type and finally
applies every profile overlay matching the server type.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from functools import partial
from typing import Any

from ..config import ValidatorConfig, create_default_config
from ..diagnostics import DefectCollector, DefectContext
from ..fetch import FetchedResponse, FetchError, fetch_url
from ..models import ResponseMetadata, ResponseType, ServerType, ValidationRequest
from .context import ResultSink, ValidationContext
from .objects import (
    validate_autnum,
    validate_domain,
    validate_entity,
    validate_ip_network,
    validate_nameserver,
    validate_object_class_name,
)
from .predicates import is_object
from .profiles import ProfileRule
from .references import SpecificationRegistry
from .responses import (
    validate_domain_search,
    validate_entity_search,
    validate_error,
    validate_help,
    validate_nameserver_search,
    validate_notices,
    validate_protocol,
    validate_rdap_conformance,
)

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], FetchedResponse]

# The envelope has already checked objectClassName for object responses
RESPONSE_VALIDATORS: dict[ResponseType, Callable[[ValidationContext, Any], None]] = {
    ResponseType.DOMAIN: partial(validate_domain, check_class_name=False),
    ResponseType.NAMESERVER: partial(validate_nameserver, check_class_name=False),
    ResponseType.ENTITY: partial(validate_entity, check_class_name=False),
    ResponseType.IP_NETWORK: partial(validate_ip_network, check_class_name=False),
    ResponseType.AUTNUM: partial(validate_autnum, check_class_name=False),
    ResponseType.HELP: validate_help,
    ResponseType.DOMAIN_SEARCH: validate_domain_search,
    ResponseType.NAMESERVER_SEARCH: validate_nameserver_search,
    ResponseType.ENTITY_SEARCH: validate_entity_search,
    ResponseType.ERROR: validate_error,
}


class RDAPValidator:
    """Validates RDAP responses against the base RFCs and server profiles."""

    def __init__(self, config: ValidatorConfig | None = None, sink: ResultSink | None = None):
        self.config = config or create_default_config()
        self.sink = sink
        self.profiles: list[ProfileRule] = []
        self.registry = SpecificationRegistry(self.config.validation.reference_base)
        self.last_context: ValidationContext | None = None

    def add_profile(self, profile: ProfileRule) -> None:
        """Add a profile overlay."""
        self.profiles.append(profile)

    def create_default_profiles(self) -> None:
        """Register the gTLD and RIR profile overlays."""
        from .profiles import GTLDRegistrarProfile, GTLDRegistryProfile, RIRProfile

        self.add_profile(GTLDRegistryProfile())
        self.add_profile(GTLDRegistrarProfile())
        self.add_profile(RIRProfile())

    def validate(self, document: Any, response_type: str, server_type: str,
                 metadata: ResponseMetadata | None = None, url: str | None = None) -> int:
        """Validate an already-parsed response document.

        Args:
            document: Parsed JSON body
            response_type: One of the ResponseType values
            server_type: One of the ServerType values
            metadata: HTTP metadata; protocol checks are skipped without it
            url: Request URL when no metadata is available

        Returns:
            Number of failed assertions
        """
        request_url = metadata.requested_url if metadata and metadata.requested_url else url
        ctx = self._new_context(request_url)
        request = self._build_request(ctx, response_type, server_type, metadata, request_url)
        if request is not None:
            self._run(ctx, "document", lambda: self._validate_document(ctx, document, request))
        return self._finish(ctx)

    def validate_body(self, text: str | bytes, response_type: str, server_type: str,
                      metadata: ResponseMetadata | None = None, url: str | None = None) -> int:
        """Validate a raw response body, reporting JSON parse failures."""
        request_url = metadata.requested_url if metadata and metadata.requested_url else url
        ctx = self._new_context(request_url)
        request = self._build_request(ctx, response_type, server_type, metadata, request_url)
        if request is not None:
            self._run(ctx, "body", lambda: self._validate_text(ctx, text, request))
        return self._finish(ctx)

    def test_url(self, url: str, response_type: str, server_type: str,
                 fetcher: Fetcher | None = None) -> int:
        """Fetch ``url`` and validate the response."""
        ctx = self._new_context(url)
        request = self._build_request(ctx, response_type, server_type, None, url)
        if request is None:
            return self._finish(ctx)

        ctx.msg(f"Testing URL is '{url}'.")
        ctx.msg("Sending request...")

        fetcher = fetcher or partial(fetch_url, config=self.config.fetch)
        try:
            fetched = fetcher(url)
        except FetchError as e:
            ctx.add(False, f"Error performing HTTP request: {e}")
            return self._finish(ctx)

        ctx.add(True, f"Received a response from the server (HTTP {fetched.status_code}).")
        request = replace(request, metadata=fetched.metadata)
        self._run(ctx, "body", lambda: self._validate_text(ctx, fetched.text, request))
        return self._finish(ctx)

    # Run plumbing

    def _new_context(self, base_url: str | None) -> ValidationContext:
        ctx = ValidationContext(
            sink=self.sink,
            registry=self.registry,
            defects=DefectCollector(),
            base_url=base_url,
        )
        self.last_context = ctx
        return ctx

    def _build_request(self, ctx: ValidationContext, response_type: str, server_type: str,
                       metadata: ResponseMetadata | None,
                       url: str | None = None) -> ValidationRequest | None:
        """Resolve the declared types, or fail the run if either is unknown."""
        try:
            response_type = ResponseType(response_type)
        except ValueError:
            ctx.add(False, f"Invalid response type '{response_type}'.")
            return None

        try:
            server_type = ServerType(server_type)
        except ValueError:
            ctx.add(False, f"Invalid server type '{server_type}'.")
            return None

        ctx.msg(f"Response type is '{response_type.label}'.")
        ctx.msg(f"Server type is '{server_type.label}'.")
        return ValidationRequest(response_type, server_type, metadata, url)

    def _run(self, ctx: ValidationContext, stage: str, body: Callable[[], None]) -> None:
        """Execute one validation stage, capturing any escaping exception."""
        try:
            body()
        except Exception as e:
            defect_id = ctx.defects.collect_error(
                e, DefectContext("RDAPValidator", stage, ctx.current_path)
            )
            logger.error(f"Validation stage '{stage}' failed with error: {e}")
            ctx.msg(f"Internal validator error ({type(e).__name__}: {e}), see defect {defect_id}.")

    def _finish(self, ctx: ValidationContext) -> int:
        ctx.msg(f"RDAP validation completed with {ctx.error_count} error(s).")
        ctx.complete()
        logger.info(f"Validation completed with {ctx.error_count} error(s)")
        return ctx.error_count

    # Traversal

    def _validate_text(self, ctx: ValidationContext, text: str | bytes,
                       request: ValidationRequest) -> None:
        if not self._validate_transport(ctx, request):
            return

        try:
            document = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            with ctx.specification("rfc9083"):
                ctx.add(False, f"Response body MUST be valid JSON ({e}).", "section-1")
            return

        ctx.add(True, "Response body is valid JSON.")
        self._validate_document(ctx, document, request, check_transport=False)

    def _validate_transport(self, ctx: ValidationContext, request: ValidationRequest) -> bool:
        if request.metadata is None:
            return True
        return validate_protocol(
            ctx,
            request.metadata.status_code,
            request.metadata.headers,
            request.response_type == ResponseType.ERROR,
        )

    def _validate_document(self, ctx: ValidationContext, document: Any,
                           request: ValidationRequest, check_transport: bool = True) -> None:
        if check_transport and not self._validate_transport(ctx, request):
            return

        with ctx.specification("rfc9083"):
            if not ctx.add(is_object(document), "Response MUST be a JSON object.", "section-1"):
                return

        validate_rdap_conformance(ctx, document)

        if request.response_type.is_object:
            validate_object_class_name(ctx, document, request.response_type.value)

        if "notices" in document:
            validate_notices(ctx, document["notices"])

        RESPONSE_VALIDATORS[request.response_type](ctx, document)

        for profile in self.profiles:
            if profile.applies_to(request):
                logger.debug(f"Applying profile: {profile.name}")
                self._run(ctx, profile.name, partial(profile.validate, ctx, document, request))


def validate(document: Any, response_type: str, server_type: str = "vanilla",
             metadata: ResponseMetadata | None = None, url: str | None = None,
             sink: ResultSink | None = None) -> int:
    """Validate ``document`` with the default profiles registered."""
    validator = RDAPValidator(sink=sink)
    validator.create_default_profiles()
    return validator.validate(document, response_type, server_type, metadata, url)

"""Base class for server profile overlays."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ...models import ResponseType, ServerType, ValidationRequest
from ..context import ValidationContext

logger = logging.getLogger(__name__)

ProfileHandler = Callable[[ValidationContext, dict, ValidationRequest], None]


class ProfileRule(ABC):
    """Additional checks a server profile layers over the base validation.

    Subclasses register one handler per response type they constrain; the
    handler runs after the base validation of the same document.
    """

    #: Specification cited by the profile's results
    specification: str = ""

    def __init__(self):
        self.handlers: dict[ResponseType, ProfileHandler] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Profile name."""
        pass

    @property
    @abstractmethod
    def server_types(self) -> frozenset[ServerType]:
        """Server types the profile applies to."""
        pass

    def applies_to(self, request: ValidationRequest) -> bool:
        return request.server_type in self.server_types

    def validate(self, ctx: ValidationContext, record: Any, request: ValidationRequest) -> None:
        """Run the handler registered for the request's response type."""
        handler = self.handlers.get(request.response_type)
        if handler is None:
            logger.debug(f"{self.name}: no rules for {request.response_type.value} responses")
            return

        ctx.msg(f"validating response against the {self.name} profile...")
        with ctx.specification(self.specification):
            handler(ctx, record, request)

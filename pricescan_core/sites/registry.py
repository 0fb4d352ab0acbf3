"""
Site handler registry - domain-keyed extraction overrides
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from ..diagnostics import get_logger, sample
from ..dom.node import PriceNode
from ..exceptions import HandlerRegistrationError
from ..models import PriceSettings

logger = get_logger(__name__)

PriceCallback = Callable[[str], None]


def normalize_domain(domain: Optional[str]) -> str:
    """
    Lowercased hostname without a leading "www.".

    Accepts a bare hostname or a full URL.
    """
    if not domain or not isinstance(domain, str):
        return ""
    domain = domain.strip().lower()
    if "://" in domain:
        try:
            domain = urlparse(domain).hostname or ""
        except ValueError:
            logger.debug(f"Unparseable domain: {sample(domain)}")
            return ""
    else:
        domain = domain.split("/", 1)[0].split(":", 1)[0]
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


class SiteHandler(ABC):
    """
    Bespoke extraction for one marketplace.

    process() reports each reconstructed price text through the callback
    and returns True when it recognized the node.
    """

    name: str = ""
    domains: Tuple[str, ...] = ()

    @abstractmethod
    def is_target_node(self, node: PriceNode) -> bool:
        pass

    @abstractmethod
    def process(self, node: PriceNode, callback: PriceCallback, settings: Optional[PriceSettings] = None) -> bool:
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name} {list(self.domains)}>"


class SiteHandlerRegistry:
    """Explicit domain -> handler map, built once at startup"""

    def __init__(self, handlers: Optional[List[SiteHandler]] = None):
        self._handlers: Dict[str, SiteHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: SiteHandler) -> SiteHandler:
        """
        Register a handler for all of its domains.

        Raises:
            HandlerRegistrationError: handler lacks a name or domains
        """
        if not isinstance(handler, SiteHandler):
            raise HandlerRegistrationError(
                f"Handler {type(handler).__name__} must inherit from SiteHandler"
            )
        if not handler.name or not handler.domains or isinstance(handler.domains, str):
            raise HandlerRegistrationError(
                f"Handler {handler!r} needs a name and a sequence of domains"
            )

        for domain in handler.domains:
            key = normalize_domain(domain)
            existing = self._handlers.get(key)
            if existing is not None and existing is not handler:
                logger.warning(
                    f"Overriding site handler for '{key}': {existing.name} -> {handler.name}"
                )
            self._handlers[key] = handler
        logger.debug(f"Registered site handler '{handler.name}' for {list(handler.domains)}")
        return handler

    def unregister(self, name: str) -> int:
        """Remove every domain served by the named handler."""
        keys = [d for d, h in self._handlers.items() if h.name == name]
        for key in keys:
            del self._handlers[key]
        return len(keys)

    def clear(self) -> None:
        self._handlers.clear()

    def get(self, domain: Optional[str]) -> Optional[SiteHandler]:
        """Exact lookup on the normalized domain; a miss is not an error."""
        return self._handlers.get(normalize_domain(domain))

    def process(
        self,
        domain: Optional[str],
        node: PriceNode,
        callback: PriceCallback,
        settings: Optional[PriceSettings] = None,
    ) -> bool:
        handler = self.get(domain)
        if handler is None:
            return False
        try:
            return bool(handler.process(node, callback, settings))
        except Exception as e:
            logger.error(f"Error in {handler.name} handler: {e} [{sample(node.text)}]")
            return False

    def list_handlers(self) -> List[Dict[str, object]]:
        seen: Dict[str, List[str]] = {}
        for domain, handler in self._handlers.items():
            seen.setdefault(handler.name, []).append(domain)
        return [{"name": name, "domains": domains} for name, domains in seen.items()]

    def domains(self) -> List[str]:
        return list(self._handlers.keys())

    def __contains__(self, domain: str) -> bool:
        return normalize_domain(domain) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

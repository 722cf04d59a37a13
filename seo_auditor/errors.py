# Exceptions raised by the page inspectors. Any of these is fatal to an audit.

from __future__ import annotations


class InspectionError(Exception):
    """The page could not be loaded, so no signals exist to score."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message


class NavigationError(InspectionError):
    """Navigation failed: DNS, connection, TLS or an unusable response."""


class NavigationTimeout(InspectionError):
    """Navigation or the network-idle wait exceeded the configured timeout."""

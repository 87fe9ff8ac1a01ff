"""Exceptions raised by the service layer and translated by the gateway handlers."""


class GatewayError(Exception):
    """Base class for sbomgate errors."""


class UrlConstructionError(GatewayError):
    """The configured SBOM base URL could not be joined with an endpoint path."""


class UpstreamTransportError(GatewayError):
    """Connection failure or timeout while talking to the SBOM backend."""


class UpstreamStatusError(GatewayError):
    """The SBOM backend answered with a non-success status."""

    def __init__(self, status: int):
        super().__init__(f"SBOM backend returned status {status}")
        self.status = status


class UpstreamDecodeError(GatewayError):
    """The SBOM backend body did not match the expected search result shape."""


class VexQueryError(GatewayError):
    """A VEX index query was malformed or the index failed to execute it."""

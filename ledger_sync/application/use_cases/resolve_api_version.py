"""Use case picking the wire format revision to talk to a server."""

from ledger_sync.domain.errors import UnsupportedVersionError
from ledger_sync.domain.models.api_version import ApiVersion, ServerVersion
from ledger_sync.infrastructure.logging.logger import get_app_logger


class ResolveApiVersionUseCase:
    """Turn the configured API version into a concrete JSON revision."""

    def __init__(self, logger=None) -> None:
        """Initialize the use case.

        Args:
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._logger = logger or get_app_logger()

    def execute(
        self,
        configured: ApiVersion,
        version_response: str | None = None,
    ) -> ApiVersion:
        """Return the revision to use.

        A configured JSON revision is kept as is. AUTO maps the answer of
        the server version endpoint to the newest compatible revision;
        ``None`` means the endpoint does not exist.

        Args:
            configured: Version stored in configuration.
            version_response: Body of the version endpoint, if it answered.

        Returns:
            ApiVersion: Revision with a JSON codec.

        Raises:
            UnsupportedVersionError: If no JSON revision fits.
            DecodeError: If the version answer cannot be parsed.
        """
        if configured.is_json:
            return configured
        if configured is ApiVersion.HTML:
            raise UnsupportedVersionError("The HTML interface has no JSON codec")

        server = (
            ServerVersion.parse(version_response)
            if version_response is not None
            else ServerVersion.legacy()
        )
        resolved = server.suitable_api_version()
        if resolved is None:
            raise UnsupportedVersionError(
                f"No JSON API revision supports server {server}"
            )
        self._logger.info(
            f"Server {server} resolved to API version {resolved.description}"
        )
        return resolved


__all__ = ["ResolveApiVersionUseCase"]

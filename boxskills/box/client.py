"""Box API client for file content and metadata operations."""

import logging
from typing import Any, Dict, Optional

from box_sdk_gen import (
    BoxClient as SDKBoxClient,
    BoxJWTAuth,
    CreateFileMetadataByIdScope,
    GetFileMetadataByIdScope,
    JWTConfig,
)
from box_sdk_gen.box.errors import BoxAPIError, BoxSDKError

from boxskills.box.exceptions import (
    BoxAuthError,
    BoxDownloadError,
    BoxError,
    BoxFileTooLargeError,
    BoxMetadataConflictError,
    BoxNotFoundError,
    BoxRequestError,
)

logger = logging.getLogger(__name__)


class BoxClient:
    """Client for reading file content and writing file metadata on Box.

    Wraps the Box SDK client for one acting user. Content is streamed in
    chunks into memory with a size ceiling; metadata is always written to
    the global scope. SDK errors are translated into the
    ``boxskills.box.exceptions`` hierarchy.

    Attributes:
        user_id: ID of the user the client acts as (if known)
        chunk_size: Bytes read per stream read
        max_file_size: Largest file accepted, in bytes (0 disables the limit)
    """

    def __init__(
        self,
        client: SDKBoxClient,
        user_id: Optional[str] = None,
        chunk_size: int = 64 * 1024,
        max_file_size: int = 50 * 1024 * 1024
    ) -> None:
        """Initialize Box client.

        Args:
            client: Authenticated Box SDK client
            user_id: ID of the user the SDK client acts as
            chunk_size: Bytes read per stream read
            max_file_size: Largest file accepted, in bytes (0 disables)
        """
        self._client = client
        self.user_id = user_id
        self.chunk_size = chunk_size
        self.max_file_size = max_file_size

    @classmethod
    def for_user(cls, config, user_id: str) -> "BoxClient":
        """Create a client authenticated as a user via JWT app auth.

        Args:
            config: ConfigManager holding the ``box.*`` credentials
            user_id: ID of the user to act as

        Returns:
            BoxClient scoped to ``user_id``

        Raises:
            BoxAuthError: If the credentials are incomplete or rejected
        """
        credentials = [
            config.get("box.client_id"),
            config.get("box.client_secret"),
            config.get("box.key_id"),
            config.get("box.private_key"),
        ]
        if not all(credentials):
            raise BoxAuthError(
                "Box app auth requires client_id, client_secret, key_id and private_key"
            )

        try:
            jwt_config = JWTConfig(
                client_id=config.get("box.client_id"),
                client_secret=config.get("box.client_secret"),
                jwt_key_id=config.get("box.key_id"),
                private_key=config.get("box.private_key"),
                private_key_passphrase=config.get("box.passphrase", ""),
                user_id=user_id,
            )
            auth = BoxJWTAuth(config=jwt_config)
        except Exception as e:
            raise BoxAuthError(f"Failed to configure Box app auth: {e}") from e

        logger.info(f"Box client initialized for user: {user_id}")
        return cls(
            SDKBoxClient(auth=auth),
            user_id=user_id,
            chunk_size=config.get("download.chunk_size", 64 * 1024),
            max_file_size=config.get("download.max_file_size", 0),
        )

    def download_file(self, file_id: str) -> bytes:
        """Download a file's current content into memory.

        Args:
            file_id: ID of the file to read

        Returns:
            Full file content

        Raises:
            BoxFileTooLargeError: If the content exceeds ``max_file_size``
            BoxNotFoundError: If the file does not exist
            BoxDownloadError: If the stream cannot be opened or read
        """
        logger.info(f"Downloading file: {file_id}")

        try:
            stream = self._client.downloads.download_file(file_id)
        except BoxSDKError as e:
            logger.error(f"Failed to open read stream for file {file_id}: {e}")
            raise self._translate_error(e, f"Failed to open file {file_id}") from e

        if stream is None:
            raise BoxDownloadError(
                f"No content returned for file {file_id}. "
                "The file may still be processing."
            )

        buffer = bytearray()
        try:
            while True:
                try:
                    chunk = stream.read(self.chunk_size)
                except (BoxSDKError, OSError) as e:
                    logger.error(f"Failed reading file {file_id}: {e}")
                    raise BoxDownloadError(
                        f"Failed to read file {file_id}: {e}"
                    ) from e

                if not chunk:
                    break

                buffer.extend(chunk)
                if self.max_file_size and len(buffer) > self.max_file_size:
                    raise BoxFileTooLargeError(
                        f"File {file_id} exceeds the {self.max_file_size} byte limit",
                        size=len(buffer),
                        limit=self.max_file_size,
                    )
        finally:
            close = getattr(stream, "close", None)
            if close:
                close()

        logger.debug(f"Downloaded file {file_id} ({len(buffer)} bytes)")
        return bytes(buffer)

    def create_file_metadata(
        self,
        file_id: str,
        template_key: str,
        values: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Create a metadata instance on a file in the global scope.

        Args:
            file_id: ID of the file
            template_key: Metadata template key
            values: Flat field -> value mapping

        Returns:
            The values written

        Raises:
            BoxMetadataConflictError: If the file already has this template
            BoxRequestError: If the write fails
        """
        logger.info(f"Writing {template_key} metadata to file: {file_id}")
        logger.debug(f"Metadata values: {values}")

        try:
            instance = self._client.file_metadata.create_file_metadata_by_id(
                file_id,
                CreateFileMetadataByIdScope.GLOBAL,
                template_key,
                dict(values),
            )
        except BoxSDKError as e:
            logger.error(f"Failed to write {template_key} metadata to file {file_id}: {e}")
            raise self._translate_error(
                e, f"Failed to write {template_key} metadata to file {file_id}"
            ) from e

        logger.debug(f"Created metadata instance: {getattr(instance, 'id', None)}")
        return dict(values)

    def get_file_metadata(self, file_id: str, template_key: str) -> Dict[str, Any]:
        """Read a global-scope metadata instance back from a file.

        Args:
            file_id: ID of the file
            template_key: Metadata template key

        Returns:
            Template field values, without the ``$``-prefixed instance fields

        Raises:
            BoxNotFoundError: If the file has no instance of the template
            BoxRequestError: If the request fails
        """
        try:
            instance = self._client.file_metadata.get_file_metadata_by_id(
                file_id,
                GetFileMetadataByIdScope.GLOBAL,
                template_key,
            )
        except BoxSDKError as e:
            raise self._translate_error(
                e, f"Failed to read {template_key} metadata from file {file_id}"
            ) from e

        # MetadataFull carries the template fields in extra_data; to_dict()
        # repeats them at the top level next to the $-prefixed instance fields
        values = getattr(instance, "extra_data", None)
        if values is None:
            values = instance.to_dict() if hasattr(instance, "to_dict") else dict(instance)
        return {
            key: value for key, value in values.items()
            if not key.startswith("$") and key != "extra_data"
        }

    @staticmethod
    def _translate_error(error: BoxSDKError, message: str) -> BoxError:
        """Map a Box SDK error onto the boxskills exception hierarchy.

        Args:
            error: Error raised by the SDK
            message: Context prefix for the new error

        Returns:
            Exception to raise
        """
        detail = getattr(error, "message", None) or str(error)
        full_message = f"{message}: {detail}"

        if not isinstance(error, BoxAPIError):
            return BoxRequestError(full_message)

        response_info = getattr(error, "response_info", None)
        status_code = getattr(response_info, "status_code", None)
        body = getattr(response_info, "body", None)

        if status_code in (401, 403):
            return BoxAuthError(full_message)
        if status_code == 404:
            return BoxNotFoundError(full_message, status_code=status_code, response=body)
        if status_code == 409:
            return BoxMetadataConflictError(full_message, status_code=status_code, response=body)
        return BoxRequestError(full_message, status_code=status_code, response=body)

    def __repr__(self) -> str:
        """Return string representation of client."""
        return f"<BoxClient user={self.user_id}>"

"""Folder, file and attachment operations.

Wraps ``/_api/web/folders``, ``GetFolderByServerRelativeUrl``,
``GetFileByServerRelativeUrl`` and list item ``AttachmentFiles``
endpoints.
"""

from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint, response_json
from splist.sharepoint.payload import EntityType, entity, unwrap, unwrap_results
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)


def _odata_bool(value: bool) -> str:
    return "true" if value else "false"


class FilesClient(SharePointEndpoint):
    """Client for document library and attachment operations."""

    async def create_folder(self, server_relative_url: str) -> dict[str, Any]:
        """Create a folder.

        Args:
            server_relative_url: Folder path, e.g. ``/sites/team/Shared Documents/reports``

        Returns:
            The created folder
        """
        url = f"{self._location.api_url}/web/folders"
        payload = entity(EntityType.FOLDER, ServerRelativeUrl=server_relative_url)

        response = await self._send(
            HttpVerb.POST,
            url,
            f"create folder {server_relative_url}",
            json=payload,
            mutating=True,
        )

        logger.info("sharepoint_folder_created", folder=server_relative_url)
        return unwrap(response_json(response)) or {}

    async def upload_file(
        self,
        folder_url: str,
        file_name: str,
        content: bytes,
        overwrite: bool = True,
    ) -> dict[str, Any]:
        """Upload a file into a folder.

        Args:
            folder_url: Server-relative folder URL
            file_name: Name of the file to create
            content: File content
            overwrite: Replace an existing file of the same name

        Returns:
            The file's metadata
        """
        url = (
            f"{self._location.api_url}/web/GetFolderByServerRelativeUrl('{folder_url}')"
            f"/files/add(overwrite={_odata_bool(overwrite)},url='{file_name}')"
        )

        logger.info(
            "sharepoint_file_upload_start",
            folder=folder_url,
            file_name=file_name,
            size=len(content),
        )

        response = await self._send(
            HttpVerb.POST,
            url,
            f"upload {file_name} to {folder_url}",
            content=content,
            mutating=True,
        )

        logger.info("sharepoint_file_uploaded", folder=folder_url, file_name=file_name)
        return unwrap(response_json(response)) or {}

    async def upload_attachment(
        self,
        list_name: str,
        item_id: int | str,
        file_name: str,
        content: bytes,
        overwrite: bool = False,
    ) -> dict[str, Any] | None:
        """Attach a file to a list item, or replace an existing attachment.

        Args:
            list_name: List title
            item_id: Item ID
            file_name: Attachment name
            content: File content
            overwrite: Replace the attachment's content (PUT on ``$value``)
                instead of adding a new one

        Returns:
            The attachment metadata when added; None when replaced
        """
        item_url = self._location.item_url(list_name, item_id)
        if overwrite:
            verb = HttpVerb.PUT
            url = f"{item_url}/AttachmentFiles('{file_name}')/$value"
        else:
            verb = HttpVerb.POST
            url = f"{item_url}/AttachmentFiles/add(FileName='{file_name}')"

        response = await self._send(
            verb,
            url,
            f"attach {file_name} to item {item_id} in {list_name}",
            content=content,
            mutating=True,
        )

        logger.info(
            "sharepoint_attachment_uploaded",
            list_name=list_name,
            item_id=item_id,
            file_name=file_name,
            overwrite=overwrite,
        )
        return unwrap(response_json(response))

    async def get_attachments(
        self,
        list_name: str,
        item_id: int | str,
    ) -> list[dict[str, Any]]:
        """List the attachments of an item."""
        url = f"{self._location.item_url(list_name, item_id)}/AttachmentFiles"
        response = await self._send(
            HttpVerb.GET,
            url,
            f"list attachments of item {item_id} in {list_name}",
        )
        return unwrap_results(response_json(response))

    async def copy_file(
        self,
        source_url: str,
        destination_url: str,
        overwrite: bool = False,
    ) -> None:
        """Copy a file to another server-relative URL."""
        url = (
            f"{self._location.api_url}/web/GetFileByServerRelativeUrl('{source_url}')"
            f"/copyto(strnewurl='{destination_url}',boverwrite={_odata_bool(overwrite)})"
        )
        await self._send(
            HttpVerb.POST,
            url,
            f"copy {source_url} to {destination_url}",
            mutating=True,
        )
        logger.info(
            "sharepoint_file_copied",
            source=source_url,
            destination=destination_url,
        )

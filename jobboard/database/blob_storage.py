"""File uploads through Supabase Storage."""

from typing import Protocol

from supabase import Client

from jobboard.errors import RemoteOperationError


class BlobStorage(Protocol):
    """Upload/download-URL interface of the remote file storage."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        ...

    def get_download_url(self, handle: str) -> str:
        ...


class SupabaseBlobStorage:
    """BlobStorage backed by a Supabase Storage bucket.

    Attributes:
        db_client: Supabase client instance.
        bucket: Name of the storage bucket.
    """

    def __init__(self, db_client: Client, bucket: str):
        self.db_client = db_client
        self.bucket = bucket

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload bytes to `path` in the bucket.

        Args:
            path: Object path inside the bucket.
            content: File content.
            content_type: MIME type stored with the object.

        Returns:
            Handle (the object path) to pass to get_download_url.

        Raises:
            RemoteOperationError: If the upload fails.
        """
        try:
            self.db_client.storage.from_(self.bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type}
            )
        except Exception as error:
            raise RemoteOperationError(
                "upload", self.bucket, str(error), getattr(error, "code", None)
            ) from error

        return path

    def get_download_url(self, handle: str) -> str:
        """Return the public URL of an uploaded object.

        Raises:
            RemoteOperationError: If the URL cannot be obtained.
        """
        try:
            return self.db_client.storage.from_(self.bucket).get_public_url(handle)
        except Exception as error:
            raise RemoteOperationError(
                "get_download_url", self.bucket, str(error), getattr(error, "code", None)
            ) from error

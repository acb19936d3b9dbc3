"""Signed URLs for objects kept in S3 (company interview videos)."""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from prep_portal.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class StorageService:

    def __init__(self, settings: Settings = None, client=None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self.settings.aws_region)
        return self._client

    def signed_url(self, key: Optional[str]) -> Optional[str]:
        """Time-limited GET URL for `key`, or None when unavailable."""
        if not key or not self.settings.bucket_name:
            return None
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.settings.bucket_name, "Key": key},
                ExpiresIn=self.settings.signed_url_expiry_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Signed URL for %s failed: %s", key, e)
            return None

"""S3 persistence backend: stores data in AWS S3 (or an S3-compatible store)."""

from __future__ import annotations

import logging
from typing import Any

log = logging.getLogger(__name__)


class S3PersistenceBackend:
    """Stores data as objects in an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: str = "us-east-1",
        tenant_id: str = "",
        kms_key_id: str = "",
        endpoint_url: str = "",
    ) -> None:
        try:
            import boto3 as _boto3
        except ImportError as e:
            raise ImportError(
                "boto3 is required for S3 persistence. "
                "Install with: pip install medlists[s3]"
            ) from e

        self._bucket = bucket
        self._prefix = f"{tenant_id}/{prefix}" if tenant_id else prefix
        self._kms_key_id = kms_key_id
        client_kwargs: dict[str, Any] = {"region_name": region}
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url
        self._s3 = _boto3.client("s3", **client_kwargs)

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _content_type(self, key: str) -> str:
        if key.endswith(".json"):
            return "application/json"
        if key.endswith(".md"):
            return "text/markdown"
        return "text/plain"

    def save(self, key: str, data: str) -> None:
        put_kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": self._full_key(key),
            "Body": data.encode("utf-8"),
            "ContentType": self._content_type(key),
        }
        if self._kms_key_id:
            put_kwargs["ServerSideEncryption"] = "aws:kms"
            put_kwargs["SSEKMSKeyId"] = self._kms_key_id
        self._s3.put_object(**put_kwargs)
        log.debug("Saved %s to s3://%s/%s", key, self._bucket, self._full_key(key))

    def load(self, key: str) -> str:
        try:
            response = self._s3.get_object(
                Bucket=self._bucket,
                Key=self._full_key(key),
            )
            return response["Body"].read().decode("utf-8")
        except self._s3.exceptions.NoSuchKey:
            raise KeyError(f"Not found in S3: {key}")

    def exists(self, key: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            self._s3.head_object(
                Bucket=self._bucket,
                Key=self._full_key(key),
            )
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise

    def delete(self, key: str) -> None:
        self._s3.delete_object(
            Bucket=self._bucket,
            Key=self._full_key(key),
        )

    def list_keys(self, prefix: str = "") -> list[str]:
        full_prefix = f"{self._prefix}{prefix}"
        paginator = self._s3.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=full_prefix):
            for obj in page.get("Contents", []):
                key = obj["Key"]
                if key.startswith(self._prefix):
                    key = key[len(self._prefix):]
                keys.append(key)
        return sorted(keys)

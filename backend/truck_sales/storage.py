# Overview: S3-compatible object storage handle bound to the Flask app.

"""
Object storage for truck images.

The boto3 client is built once per application in init_app() and kept in
app.extensions["object_storage"]. Only public URLs ever reach the database;
binary content lives in the bucket.

Works against AWS S3 or any S3-compatible endpoint (Supabase Storage, MinIO)
by setting STORAGE_ENDPOINT_URL.
"""
from __future__ import annotations

import boto3
from botocore.config import Config as BotoConfig
from flask import Flask, current_app

EXTENSION_KEY = "object_storage"


class StorageNotConfiguredError(RuntimeError):
    """Raised when an upload is attempted on an app without a storage client."""


class ObjectStorage:
    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.extensions[EXTENSION_KEY] = self._build_client(app.config)

    @staticmethod
    def _build_client(config):
        boto_config = BotoConfig(
            connect_timeout=5,
            read_timeout=30,
            retries={"max_attempts": 1},
        )
        return boto3.client(
            "s3",
            endpoint_url=config.get("STORAGE_ENDPOINT_URL"),
            region_name=config.get("STORAGE_REGION"),
            aws_access_key_id=config.get("STORAGE_ACCESS_KEY_ID"),
            aws_secret_access_key=config.get("STORAGE_SECRET_ACCESS_KEY"),
            config=boto_config,
        )

    @property
    def client(self):
        client = current_app.extensions.get(EXTENSION_KEY)
        if client is None:
            raise StorageNotConfiguredError("Object storage is not configured")
        return client

    @property
    def bucket(self) -> str:
        return current_app.config["STORAGE_BUCKET"]

    def public_url(self, key: str) -> str:
        base = current_app.config.get("STORAGE_PUBLIC_BASE_URL")
        if not base:
            endpoint = current_app.config.get("STORAGE_ENDPOINT_URL")
            if endpoint:
                base = f"{endpoint.rstrip('/')}/{self.bucket}"
            else:
                base = f"https://{self.bucket}.s3.amazonaws.com"
        return f"{base.rstrip('/')}/{key}"

    def put(self, key: str, body: bytes, content_type: str) -> str:
        """Write one object and return its public URL."""
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
        return self.public_url(key)

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)

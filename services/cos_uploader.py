"""
COS (Tencent Cloud Object Storage) upload through the S3-compatible API

This module provides:
- Bucket URL parsing (bucket name, service endpoint, region)
- COS client creation (once per process)
- Object upload with overwrite semantics
"""

from urllib.parse import urlparse
import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from errors import ConfigError, UploadError
from log_config import enable_botocore_debug, get_sync_logger

logger = get_sync_logger()

DEFAULT_REGION = "auto"


def parse_bucket_url(bucket_url):
    """
    Split a virtual-hosted bucket URL into its parts

    https://examplebucket-1250000000.cos.ap-guangzhou.myqcloud.com
        -> ('examplebucket-1250000000', 'https://cos.ap-guangzhou.myqcloud.com', 'ap-guangzhou')

    Raises:
        ConfigError: URL is not an http(s) URL with a bucket host label
    """
    parsed = urlparse(bucket_url or "")
    host = parsed.hostname or ""
    if parsed.scheme not in ("http", "https") or host.count(".") < 1:
        raise ConfigError(f"Invalid COS bucket URL: {bucket_url!r}")

    bucket, service_host = host.split(".", 1)
    if not bucket:
        raise ConfigError(f"Invalid COS bucket URL: {bucket_url!r}")

    netloc = service_host if parsed.port is None else f"{service_host}:{parsed.port}"
    endpoint_url = f"{parsed.scheme}://{netloc}"

    labels = service_host.split(".")
    region = labels[1] if len(labels) > 2 and labels[0] == "cos" else DEFAULT_REGION
    return bucket, endpoint_url, region


def create_cos_client(settings):
    """
    Create and return a configured COS (S3-compatible) client
    """
    _, endpoint_url, region = parse_bucket_url(settings.bucket_url)

    if settings.debug:
        # 요청/응답 헤더만 botocore 로그로 출력 (본문 제외)
        enable_botocore_debug()

    config = BotoConfig(
        signature_version="s3v4",
        retries={"total_max_attempts": 1},  # no retry
        s3={
            "addressing_style": "virtual"  # Use virtual hosted-style requests
        }
    )

    client = boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=settings.secret_id,
        aws_secret_access_key=settings.secret_key,
        region_name=region,
        config=config
    )
    logger.info(f"COS client created: endpoint={endpoint_url}, region={region}")
    return client


class CosUploader:
    """Writes a single object to the configured bucket"""

    def __init__(self, client, bucket):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings):
        bucket, _, _ = parse_bucket_url(settings.bucket_url)
        return cls(create_cos_client(settings), bucket)

    def upload(self, object_key, content):
        """
        Create or overwrite an object

        Args:
            object_key: Object key in the bucket
            content: Object body (bytes)

        Raises:
            UploadError: authentication, network or bucket errors
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=content,
                ContentType="text/plain; charset=utf-8",
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"upload to cos err: {object_key} - {code}: {str(e)}")
            raise UploadError(f"Upload of {object_key} failed ({code}): {str(e)}", object_key=object_key) from e
        except BotoCoreError as e:
            logger.error(f"upload to cos err: {object_key} - {str(e)}")
            raise UploadError(f"Upload of {object_key} failed: {str(e)}", object_key=object_key) from e

        logger.info(f"Successfully uploaded COS object: {self.bucket}/{object_key} ({len(content)} bytes)")

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .. import config

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600


def get_r2_client():
    """Get configured boto3 client for Cloudflare R2"""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=config.R2_ACCESS_KEY_ID,
        aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name="auto",
    )


def generate_download_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned GET URL for a stored document."""
    r2 = get_r2_client()
    try:
        url = r2.generate_presigned_url(
            "get_object",
            Params={"Bucket": config.R2_BUCKET_NAME, "Key": key},
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise


def delete_document_object(key: str) -> bool:
    """
    Remove a document from the bucket.

    Failures are logged and reported as False; the database row is the
    source of truth, so callers continue with their own cleanup.
    """
    try:
        get_r2_client().delete_object(Bucket=config.R2_BUCKET_NAME, Key=key)
        logger.info(f"Deleted document object: {key}")
        return True
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Storage delete warning for {key}: {e}")
        return False

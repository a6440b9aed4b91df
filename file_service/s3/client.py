"""
S3 Client wrapper.
Handles the multipart upload calls, signed URLs and bucket CORS for the upload bucket.
"""

import logging
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from file_service.core.config import settings
from file_service.s3.config import BUCKET_CORS_RULES

logger = logging.getLogger(__name__)


class S3Client:
    """Wrapper for S3 multipart operations on a single bucket."""

    def __init__(self, bucket: Optional[str] = None):
        """Initialize S3 client from settings."""
        self.bucket = bucket or settings.AWS_BUCKET_NAME

        self.client = boto3.client(
            's3',
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            config=Config(signature_version='s3v4'),
            region_name=settings.AWS_REGION
        )

        logger.info(f"S3 client initialized for bucket {self.bucket} (region {settings.AWS_REGION})")

    def create_multipart_upload(self, key: str, content_type: str) -> str:
        """
        Open a multipart upload.

        Args:
            key: Destination object key
            content_type: MIME type of the whole object

        Returns:
            The S3 UploadId

        Raises:
            ClientError: If S3 rejects the request
        """
        try:
            response = self.client.create_multipart_upload(
                Bucket=self.bucket,
                Key=key,
                ContentType=content_type
            )
            upload_id = response["UploadId"]
            logger.info(f"Created multipart upload for {self.bucket}/{key}: {upload_id}")
            return upload_id

        except ClientError as e:
            logger.error(f"Failed to create multipart upload for {self.bucket}/{key}: {e}")
            raise

    def generate_upload_part_url(
        self,
        key: str,
        upload_id: str,
        part_number: int,
        expiration: int
    ) -> str:
        """
        Generate a presigned URL that accepts a PUT of one part.

        Args:
            key: Object key of the multipart upload
            upload_id: S3 UploadId
            part_number: 1-indexed part number
            expiration: URL expiration time in seconds

        Returns:
            Presigned URL string

        Raises:
            ClientError: If URL generation fails
        """
        try:
            return self.client.generate_presigned_url(
                'upload_part',
                Params={
                    'Bucket': self.bucket,
                    'Key': key,
                    'UploadId': upload_id,
                    'PartNumber': part_number
                },
                ExpiresIn=expiration
            )

        except ClientError as e:
            logger.error(f"Failed to sign part {part_number} of {self.bucket}/{key}: {e}")
            raise

    def complete_multipart_upload(self, key: str, upload_id: str, parts: list[dict]) -> dict:
        """
        Assemble uploaded parts into the final object.

        Args:
            key: Object key of the multipart upload
            upload_id: S3 UploadId
            parts: [{"PartNumber": int, "ETag": str}] in ascending part order

        Returns:
            S3 response dict (Location, Bucket, Key, ETag)

        Raises:
            ClientError: If S3 rejects the part list or the upload id
        """
        try:
            response = self.client.complete_multipart_upload(
                Bucket=self.bucket,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={"Parts": parts}
            )
            logger.info(f"Completed multipart upload {upload_id} for {self.bucket}/{key} ({len(parts)} parts)")
            return response

        except ClientError as e:
            logger.error(f"Failed to complete multipart upload {upload_id} for {self.bucket}/{key}: {e}")
            raise

    def generate_presigned_url(self, key: str, expiration: int) -> str:
        """
        Generate a presigned URL for temporary download access.

        Args:
            key: Object key
            expiration: URL expiration time in seconds

        Returns:
            Presigned URL string

        Raises:
            ClientError: If URL generation fails
        """
        try:
            return self.client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=expiration
            )

        except ClientError as e:
            logger.error(f"Failed to generate presigned URL for {self.bucket}/{key}: {e}")
            raise

    def check_connection(self) -> None:
        """Raise ClientError if the bucket is unreachable."""
        self.client.head_bucket(Bucket=self.bucket)

    def configure_cors(self) -> None:
        """
        Allow browsers to PUT parts cross-origin and read the ETag header.

        Raises:
            ClientError: If the CORS configuration is rejected
        """
        try:
            self.client.put_bucket_cors(
                Bucket=self.bucket,
                CORSConfiguration={"CORSRules": BUCKET_CORS_RULES}
            )
            logger.info(f"Configured CORS for bucket: {self.bucket}")

        except ClientError as e:
            logger.error(f"Failed to configure CORS for {self.bucket}: {e}")
            raise


# Global S3 client instance
s3_client = S3Client()

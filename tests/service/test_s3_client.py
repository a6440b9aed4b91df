from urllib.parse import parse_qs, urlsplit

import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from file_service.s3.client import S3Client
from file_service.s3.config import BUCKET_CORS_RULES

BUCKET = "test-uploads"


@pytest.fixture
def s3():
    return S3Client(bucket=BUCKET)


def test_create_multipart_upload(s3):
    with Stubber(s3.client) as stubber:
        stubber.add_response(
            "create_multipart_upload",
            {"Bucket": BUCKET, "Key": "1_movie.mkv", "UploadId": "abc123"},
            {"Bucket": BUCKET, "Key": "1_movie.mkv", "ContentType": "video/x-matroska"},
        )

        assert s3.create_multipart_upload("1_movie.mkv", "video/x-matroska") == "abc123"
        stubber.assert_no_pending_responses()


def test_create_multipart_upload_error_is_reraised(s3):
    with Stubber(s3.client) as stubber:
        stubber.add_client_error("create_multipart_upload", service_error_code="AccessDenied", http_status_code=403)

        with pytest.raises(ClientError):
            s3.create_multipart_upload("1_movie.mkv", "video/x-matroska")


def test_complete_multipart_upload_sends_parts_in_order(s3):
    parts = [{"PartNumber": 1, "ETag": "aaa"}, {"PartNumber": 2, "ETag": "bbb"}]

    with Stubber(s3.client) as stubber:
        stubber.add_response(
            "complete_multipart_upload",
            {"Bucket": BUCKET, "Key": "1_movie.mkv", "ETag": '"final"'},
            {
                "Bucket": BUCKET,
                "Key": "1_movie.mkv",
                "UploadId": "abc123",
                "MultipartUpload": {"Parts": parts},
            },
        )

        response = s3.complete_multipart_upload("1_movie.mkv", "abc123", parts)

    assert response["ETag"] == '"final"'


def test_complete_multipart_upload_rejection(s3):
    with Stubber(s3.client) as stubber:
        stubber.add_client_error("complete_multipart_upload", service_error_code="InvalidPartOrder")

        with pytest.raises(ClientError):
            s3.complete_multipart_upload("1_movie.mkv", "abc123", [{"PartNumber": 1, "ETag": "x"}])


def test_upload_part_url_is_signed_for_one_part(s3):
    url = s3.generate_upload_part_url("1_movie.mkv", "abc123", 3, expiration=10800)
    query = parse_qs(urlsplit(url).query)

    assert urlsplit(url).path.endswith("/1_movie.mkv")
    assert query["uploadId"] == ["abc123"]
    assert query["partNumber"] == ["3"]
    assert query["X-Amz-Expires"] == ["10800"]
    assert "X-Amz-Signature" in query


def test_download_url(s3):
    url = s3.generate_presigned_url("1_movie.mkv", expiration=600)
    query = parse_qs(urlsplit(url).query)

    assert query["X-Amz-Expires"] == ["600"]
    assert "uploadId" not in query


def test_configure_cors_exposes_etag(s3):
    assert BUCKET_CORS_RULES[0]["ExposeHeaders"] == ["ETag"]

    with Stubber(s3.client) as stubber:
        stubber.add_response(
            "put_bucket_cors",
            {},
            {"Bucket": BUCKET, "CORSConfiguration": {"CORSRules": BUCKET_CORS_RULES}},
        )

        s3.configure_cors()
        stubber.assert_no_pending_responses()


def test_check_connection(s3):
    with Stubber(s3.client) as stubber:
        stubber.add_response("head_bucket", {}, {"Bucket": BUCKET})
        s3.check_connection()

        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        with pytest.raises(ClientError):
            s3.check_connection()

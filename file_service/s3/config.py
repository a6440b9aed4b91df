"""
S3 Multipart Configuration.
Constants for part numbering and bucket CORS rules.
"""

# S3 multipart limits
MIN_PART_NUMBER = 1
MAX_PART_NUMBER = 10000

# Browsers PUT chunks straight to pre-signed URLs and must be able to read
# the ETag response header to report completion tokens
BUCKET_CORS_RULES = [
    {
        "AllowedHeaders": ["*"],
        "AllowedMethods": ["PUT", "GET", "HEAD"],
        "AllowedOrigins": ["*"],
        "ExposeHeaders": ["ETag"],
        "MaxAgeSeconds": 3000,
    }
]

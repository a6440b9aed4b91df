"""
File service: S3 multipart session management and upload metadata.
"""

"""
Upload client: splits files into chunks, uploads them to pre-signed S3 URLs
and finalizes the upload through the file service.
"""

"""
Core logic for file metadata and pricing.

This package is framework-agnostic - it doesn't import boto3, httpx or fastapi.
That separation means we can test record building and price math in
isolation from any provider.
"""

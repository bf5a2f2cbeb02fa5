"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- geo: IP geolocation and exchange-rate HTTP APIs
- storage: S3-compatible object storage
"""

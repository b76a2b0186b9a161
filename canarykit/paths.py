"""Parsing of bucket URLs and SMB share paths used by folder checks."""

from __future__ import annotations

__all__ = ["parse_s3_path", "parse_gcs_path", "extract_server_details"]


def _split_bucket(fullpath: str, prefix: str) -> tuple[str, str]:
    trimmed = fullpath.removeprefix(prefix)
    bucket, _, path = trimmed.partition("/")
    return bucket, path


def parse_s3_path(fullpath: str) -> tuple[str, str]:
    """Split ``s3://bucket/path`` into the bucket name and the path inside it."""
    return _split_bucket(fullpath, "s3://")


def parse_gcs_path(fullpath: str) -> tuple[str, str]:
    """Split ``gcs://bucket/path`` into the bucket name and the path inside it."""
    return _split_bucket(fullpath, "gcs://")


def extract_server_details(server_path: str) -> tuple[str, str, str]:
    """Split a UNC-style ``\\\\server\\share\\path`` into server, share and search path.

    Raises ValueError when the path is empty or names no share.
    """
    server_path = server_path.lstrip("\\")
    if not server_path:
        raise ValueError("empty path specified")
    parts = server_path.split("\\", 2)
    if len(parts) == 1:
        raise ValueError(f"error parsing path: {server_path}")
    server, share = parts[0], parts[1]
    if len(parts) == 2:
        return server, share, "."
    return server, share, parts[2].replace("\\", "/")
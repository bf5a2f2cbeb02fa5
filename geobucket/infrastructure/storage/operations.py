"""
Bulk operations over a bucket "directory" (key prefix).

All functions are async to match the rest of the library even though
boto3 is synchronous. Listings are paginated with continuation tokens
and processed one page at a time.
"""

import logging
from typing import Optional, Union

from .client import NoValidKeysError, S3Client, require

logger = logging.getLogger(__name__)


def _list_page(
    client: S3Client,
    bucket: str,
    prefix: str,
    continuation_token: Optional[str],
) -> dict:
    params = {"Bucket": bucket, "Prefix": prefix}
    if continuation_token:
        params["ContinuationToken"] = continuation_token
    return client.list_objects_v2(**params)


async def empty_s3_directory(client: S3Client, bucket: str, prefix: str) -> int:
    """
    Delete every object under `prefix`.

    Each listed page is batch-deleted before the next one is fetched.
    Returns the number of keys deleted; nothing is deleted (and no delete
    call is issued) when the prefix is empty.
    """
    require(client=client, bucket=bucket, prefix=prefix)

    deleted = 0
    continuation_token = None

    while True:
        listed = _list_page(client, bucket, prefix, continuation_token)
        contents = listed.get("Contents") or []
        if not contents:
            break

        client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [{"Key": obj["Key"]} for obj in contents]},
        )
        deleted += len(contents)

        if not listed.get("IsTruncated"):
            break
        continuation_token = listed.get("NextContinuationToken")

    logger.info(
        "Emptied directory",
        extra={"bucket": bucket, "prefix": prefix, "count": deleted}
    )
    return deleted


async def copy_s3_directory(
    *,
    client: S3Client,
    bucket: str,
    from_prefix: str,
    to_prefix: str,
    only_direct: bool = False,
) -> int:
    """
    Copy every object under `from_prefix` to the same path under `to_prefix`.

    With `only_direct`, nested keys (anything with a '/' after the prefix)
    are skipped. A failed copy is logged and the loop moves on, so the
    result may be partial. Returns the number of objects copied.
    """
    require(client=client, bucket=bucket, from_prefix=from_prefix, to_prefix=to_prefix)

    if from_prefix == to_prefix:
        return 0

    copied = 0
    continuation_token = None

    while True:
        listed = _list_page(client, bucket, from_prefix, continuation_token)
        contents = listed.get("Contents") or []
        if not contents:
            break

        for obj in contents:
            source_key = obj["Key"]
            relative_path = source_key[len(from_prefix):]
            if only_direct and "/" in relative_path:
                continue

            target_key = source_key.replace(from_prefix, to_prefix, 1)
            try:
                client.copy_object(
                    Bucket=bucket,
                    CopySource={"Bucket": bucket, "Key": source_key},
                    Key=target_key,
                )
                copied += 1
                logger.debug(
                    "Copied object",
                    extra={"source": source_key, "target": target_key}
                )
            except Exception as e:
                logger.error(
                    "Failed to copy object",
                    extra={"bucket": bucket, "key": source_key, "error": str(e)}
                )

        if not listed.get("IsTruncated"):
            break
        continuation_token = listed.get("NextContinuationToken")

    logger.info(
        "Copied directory",
        extra={
            "bucket": bucket,
            "from_prefix": from_prefix,
            "to_prefix": to_prefix,
            "count": copied,
        }
    )
    return copied


async def delete_s3_files(
    keys: Union[str, list[str]],
    key_prefix: str,
    *,
    client: S3Client,
    bucket: str,
    private_bucket: bool = False,
    validate_prefix: bool = True,
) -> list[str]:
    """
    Delete specific keys in one batch.

    With `validate_prefix`, keys that do not contain `key_prefix` are
    dropped first. The check is a substring match, not an anchored one.
    Returns the keys that were sent for deletion.
    """
    require(client=client, bucket=bucket, keys=keys, key_prefix=key_prefix)

    key_list = [keys] if isinstance(keys, str) else list(keys)
    if validate_prefix:
        keys_to_delete = [key for key in key_list if key_prefix in key]
    else:
        keys_to_delete = key_list

    if not keys_to_delete:
        raise NoValidKeysError("No valid keys found for deletion.")

    client.delete_objects(
        Bucket=bucket,
        Delete={"Objects": [{"Key": key} for key in keys_to_delete]},
    )

    logger.info(
        "Deleted files",
        extra={
            "bucket": bucket,
            "private_bucket": private_bucket,
            "count": len(keys_to_delete),
            "rejected": len(key_list) - len(keys_to_delete),
        }
    )
    return keys_to_delete

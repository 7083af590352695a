"""
Lambda handler for house photo uploads.

Accepts a multipart/form-data body with a single ``file`` part, checks the
content type and size, and stores the image in S3 under a generated name.
The returned ``imagePath`` is what the client sends back when creating a house.
"""
import os
import re
import uuid
import base64
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from utils.logging_utils import get_logger
from utils.lambda_utils import standard_lambda_handler, get_s3_client
from utils.actor_utils import get_header
from utils.errors import InternalError, ValidationError
from utils.response import api_response

logger = get_logger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB file size limit
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}
UPLOAD_PREFIX = "uploads"

S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "housemap-dev-uploads")


def parse_multipart_form_data(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Parse multipart form data from an API Gateway event.

    Args:
        event (dict): API Gateway event

    Returns:
        dict: ``{"files": {name: {...}}, "fields": {name: str}}``, or None if the
        body is not multipart
    """
    content_type = get_header(event, "content-type") or ""
    if "multipart/form-data" not in content_type:
        logger.warning(f"Invalid content type for multipart: {content_type}")
        return None

    boundary_match = re.search(r'boundary="?([^";]+)"?', content_type)
    if not boundary_match:
        logger.warning("No boundary found in content type")
        return None
    boundary = ("--" + boundary_match.group(1)).encode("latin-1")

    body = event.get("body") or ""
    if event.get("isBase64Encoded", False):
        raw = base64.b64decode(body)
    else:
        raw = body.encode("latin-1") if isinstance(body, str) else body

    form_data = {"files": {}, "fields": {}}

    for part in raw.split(boundary):
        # Strip the CRLF that follows each boundary and the closing "--" marker
        if part.startswith(b"\r\n"):
            part = part[2:]
        if not part or part.startswith(b"--"):
            continue
        if part.endswith(b"\r\n"):
            part = part[:-2]

        if b"\r\n\r\n" not in part:
            logger.warning("Skipping malformed multipart section")
            continue
        raw_headers, content = part.split(b"\r\n\r\n", 1)

        headers = {}
        for line in raw_headers.decode("latin-1").split("\r\n"):
            if ":" in line:
                key, value = line.split(":", 1)
                headers[key.strip().lower()] = value.strip()

        disposition = headers.get("content-disposition", "")
        name_match = re.search(r'\bname="([^"]*)"', disposition)
        if not name_match:
            logger.warning(f"No name found in content disposition: {disposition}")
            continue
        name = name_match.group(1)

        filename_match = re.search(r'filename="([^"]*)"', disposition)
        if filename_match:
            form_data["files"][name] = {
                "file_name": filename_match.group(1),
                "content_type": headers.get("content-type", "application/octet-stream").lower(),
                "content": content,
            }
        else:
            form_data["fields"][name] = content.decode("utf-8", errors="replace")

    return form_data


def generate_object_key(file_name: str) -> str:
    """
    Generate a unique S3 key for an uploaded image, keeping its extension.

    Args:
        file_name (str): Name of the file as sent by the browser

    Returns:
        str: Key of the form ``uploads/<uuid><ext>``
    """
    ext = os.path.splitext(os.path.basename(file_name or ""))[1].lower() or ".jpg"
    return f"{UPLOAD_PREFIX}/{uuid.uuid4()}{ext}"


def upload_to_s3(content: bytes, s3_key: str, content_type: str) -> None:
    """
    Store an image in the uploads bucket.

    Raises:
        InternalError: If S3 rejects the upload
    """
    try:
        s3 = get_s3_client()
        s3.put_object(
            Bucket=S3_BUCKET_NAME,
            Key=s3_key,
            Body=content,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Error uploading file to S3: {str(e)}")
        raise InternalError("Failed to upload file")
    logger.info(f"Successfully uploaded file to S3: {s3_key}")


@standard_lambda_handler()
def lambda_handler(event: dict, _context=None) -> dict:
    """
    Handles a house photo upload.

    Args:
        event (dict): API Gateway event with a multipart/form-data body
        _context (dict): Lambda execution context (unused)

    Returns:
        dict: 201 with ``imagePath`` on success, 400 for a missing, oversized
        or unsupported file, 500 if storage fails
    """
    form_data = parse_multipart_form_data(event)
    upload = (form_data or {}).get("files", {}).get("file")
    if not upload:
        raise ValidationError("No file provided")

    if upload["content_type"] not in ALLOWED_CONTENT_TYPES:
        raise ValidationError("Invalid file type. Allowed: jpg, png, webp, gif")

    if len(upload["content"]) > MAX_FILE_SIZE:
        raise ValidationError("File too large. Maximum size is 5MB")

    s3_key = generate_object_key(upload["file_name"])
    upload_to_s3(upload["content"], s3_key, upload["content_type"])

    return api_response(201, data={"imagePath": f"/{s3_key}"}, event=event)

"""
Test the upload_file lambda function
"""
import json
import base64

from botocore.exceptions import ClientError

from files.upload_file import lambda_handler, MAX_FILE_SIZE, generate_object_key, parse_multipart_form_data

BOUNDARY = "----HouseMapBoundary7MA4YWxk"


def multipart_event(api_gateway_event, content=b"\xff\xd8\xffdummy", file_name="porch.jpg",
                    content_type="image/jpeg", field_name="file", base64_encoded=False):
    """Build an upload event with a single multipart part"""
    body = (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{field_name}"; filename="{file_name}"\r\n'
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode("latin-1") + content + f"\r\n--{BOUNDARY}--\r\n".encode("latin-1")

    event = api_gateway_event(
        http_method="POST",
        path="/upload",
        headers={"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"},
    )
    if base64_encoded:
        event["body"] = base64.b64encode(body).decode("ascii")
        event["isBase64Encoded"] = True
    else:
        event["body"] = body.decode("latin-1")
    return event


def test_upload_file_success(test_db, api_gateway_event, mock_s3):
    """ Test a successful image upload """
    content = b"\xff\xd8\xff\xe0binary\r\nwith-crlf"
    event = multipart_event(api_gateway_event, content=content)

    response = lambda_handler(event, {}, db_session=test_db)
    body = json.loads(response["body"])

    assert response["statusCode"] == 201
    assert body["imagePath"].startswith("/uploads/")
    assert body["imagePath"].endswith(".jpg")

    mock_s3.put_object.assert_called_once()
    call_args = mock_s3.put_object.call_args[1]
    assert call_args["Key"] == body["imagePath"].lstrip("/")
    assert call_args["Body"] == content
    assert call_args["ContentType"] == "image/jpeg"


def test_upload_base64_body(test_db, api_gateway_event, mock_s3):
    """ Test that base64-encoded bodies from API Gateway are decoded """
    event = multipart_event(api_gateway_event, content=b"\x89PNGdata", file_name="lights.png",
                            content_type="image/png", base64_encoded=True)

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 201
    assert json.loads(response["body"])["imagePath"].endswith(".png")
    assert mock_s3.put_object.call_args[1]["Body"] == b"\x89PNGdata"


def test_upload_invalid_file_type(test_db, api_gateway_event, mock_s3):
    """ Test that non-image files are rejected """
    event = multipart_event(api_gateway_event, content=b"%PDF", file_name="flyer.pdf", content_type="application/pdf")

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "Invalid file type. Allowed: jpg, png, webp, gif"
    mock_s3.put_object.assert_not_called()


def test_upload_file_too_large(test_db, api_gateway_event, mock_s3):
    """ Test that files over 5MB are rejected """
    event = multipart_event(api_gateway_event, content=b"a" * (MAX_FILE_SIZE + 1))

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "File too large. Maximum size is 5MB"
    mock_s3.put_object.assert_not_called()


def test_upload_missing_file(test_db, api_gateway_event, mock_s3):
    """ Test that a form without a file part is rejected """
    event = multipart_event(api_gateway_event, field_name="photo")

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "No file provided"


def test_upload_not_multipart(test_db, api_gateway_event, mock_s3):
    """ Test that a JSON body is treated as a missing file """
    event = api_gateway_event(http_method="POST", path="/upload", body={"file": "nope"})

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 400


def test_upload_s3_failure(test_db, api_gateway_event, mock_s3):
    """ Test that storage failures are reported as server errors """
    mock_s3.put_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )
    event = multipart_event(api_gateway_event)

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 500
    assert json.loads(response["body"])["error"] == "Failed to upload file"


def test_parse_multipart_text_fields(api_gateway_event):
    """ Test that plain form fields are collected separately from files """
    body = (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="caption"\r\n\r\n'
        "Front porch\r\n"
        f"--{BOUNDARY}--\r\n"
    )
    event = api_gateway_event(headers={"Content-Type": f'multipart/form-data; boundary="{BOUNDARY}"'})
    event["body"] = body

    form_data = parse_multipart_form_data(event)

    assert form_data == {"files": {}, "fields": {"caption": "Front porch"}}


def test_generate_object_key_defaults_extension():
    key = generate_object_key("photo")

    assert key.startswith("uploads/")
    assert key.endswith(".jpg")


def test_generate_object_key_keeps_extension():
    assert generate_object_key("Snow.WEBP").endswith(".webp")

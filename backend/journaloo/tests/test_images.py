"""
Tests for entry image upload and download.
"""
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from conftest import auth, create_journey, create_entry
from journaloo.core.config import settings
from journaloo.core.exceptions import ImageNotFoundError, StorageError
from journaloo.services.storage_service import S3StorageClient, image_key

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def entry(client, user_token):
    journey = create_journey(client, user_token)
    return create_entry(client, user_token, journey["id"])


def upload(client, token, entry_id, data=PNG_BYTES, content_type="image/png"):
    return client.post(
        f"/entry/{entry_id}/image",
        files={"file": ("photo.png", data, content_type)},
        headers=auth(token)
    )


def test_upload_and_download_image(client, user_token, entry, storage):
    response = upload(client, user_token, entry["id"])
    assert response.status_code == 204
    assert image_key(entry["id"]) in storage.stored_objects

    response = client.get(f"/entry/{entry['id']}/image")
    assert response.status_code == 200
    assert response.content == PNG_BYTES
    assert response.headers["content-type"] == "image/png"


def test_upload_replaces_previous_image(client, user_token, entry):
    upload(client, user_token, entry["id"])
    upload(client, user_token, entry["id"], data=b"jpeg-bytes", content_type="image/jpeg")

    response = client.get(f"/entry/{entry['id']}/image")
    assert response.content == b"jpeg-bytes"
    assert response.headers["content-type"] == "image/jpeg"


def test_download_missing_image(client, entry):
    assert client.get(f"/entry/{entry['id']}/image").status_code == 404
    assert client.get(f"/entry/{entry['id'] + 100}/image").status_code == 404


def test_upload_rejects_non_images(client, user_token, entry):
    response = upload(client, user_token, entry["id"], data=b"%PDF", content_type="application/pdf")
    assert response.status_code == 400


def test_upload_rejects_oversized_file(client, user_token, entry, storage, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 16)

    response = upload(client, user_token, entry["id"], data=b"\xff" * 40)
    assert response.status_code == 400
    assert response.json()["detail"] == "File too large (max 16 bytes)"
    assert storage.stored_objects == {}

    assert upload(client, user_token, entry["id"], data=b"\xff" * 16).status_code == 204


def test_upload_requires_owner(client, user_token, other_token, entry):
    assert upload(client, other_token, entry["id"]).status_code == 404
    assert client.post(
        f"/entry/{entry['id']}/image", files={"file": ("photo.png", PNG_BYTES, "image/png")}
    ).status_code == 401


def _client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


@patch("journaloo.services.storage_service.boto3.client")
def test_s3_client_round_trip(mock_boto_client):
    s3 = MagicMock()
    s3.get_object.return_value = {"Body": MagicMock(read=lambda: b"data"), "ContentType": "image/png"}
    mock_boto_client.return_value = s3

    storage = S3StorageClient(bucket="journaloo-test", region="us-east-1")
    storage.put_image(7, b"data", "image/png")
    s3.put_object.assert_called_once_with(
        Bucket="journaloo-test", Key="entries/7/image", Body=b"data", ContentType="image/png"
    )

    image = storage.get_image(7)
    assert image.data == b"data"
    assert image.content_type == "image/png"


@patch("journaloo.services.storage_service.boto3.client")
def test_s3_client_missing_key(mock_boto_client):
    s3 = MagicMock()
    s3.get_object.side_effect = _client_error("NoSuchKey")
    mock_boto_client.return_value = s3

    with pytest.raises(ImageNotFoundError):
        S3StorageClient(bucket="journaloo-test", region="us-east-1").get_image(7)


@patch("journaloo.services.storage_service.boto3.client")
def test_s3_client_upstream_failure(mock_boto_client):
    s3 = MagicMock()
    s3.get_object.side_effect = _client_error("AccessDenied")
    s3.put_object.side_effect = _client_error("InternalError")
    mock_boto_client.return_value = s3

    storage = S3StorageClient(bucket="journaloo-test", region="us-east-1")
    with pytest.raises(StorageError) as excinfo:
        storage.get_image(7)
    assert not isinstance(excinfo.value, ImageNotFoundError)
    with pytest.raises(StorageError):
        storage.put_image(7, b"data", "image/png")


def test_storage_failure_maps_to_500(client, user_token, entry, storage):
    storage.put_image = MagicMock(side_effect=StorageError("Failed to store image"))
    response = upload(client, user_token, entry["id"])
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to store image"}


@patch("journaloo.services.storage_service.boto3.client")
def test_s3_client_delete(mock_boto_client):
    s3 = MagicMock()
    mock_boto_client.return_value = s3

    storage = S3StorageClient(bucket="journaloo-test", region="us-east-1")
    storage.delete_image(7)
    s3.delete_object.assert_called_once_with(Bucket="journaloo-test", Key="entries/7/image")

    s3.delete_object.side_effect = _client_error("AccessDenied")
    with pytest.raises(StorageError):
        storage.delete_image(7)

# tests/test_gateways.py
"""Vision and Storage gateways against mocked Google Cloud clients."""
from __future__ import annotations

import re
from types import SimpleNamespace
from unittest import mock

import pytest
from google.api_core.exceptions import ServiceUnavailable
from google.auth.exceptions import RefreshError, TransportError
from google.cloud import vision

from errors import ClassificationError, UploadError
from services.storage import StorageGateway
from services.vision import VisionGateway


def vision_response(landmarks=(), labels=(), error=""):
    return SimpleNamespace(
        landmark_annotations=[SimpleNamespace(description=d) for d in landmarks],
        label_annotations=[SimpleNamespace(description=d) for d in labels],
        error=SimpleNamespace(message=error),
    )


# -------- Vision --------
def test_detect_landmarks_returns_descriptions_in_service_order():
    client = mock.Mock()
    client.landmark_detection.return_value = vision_response(landmarks=["Eiffel Tower", "Champ de Mars"])

    result = VisionGateway(client).detect_landmarks(b"img")

    assert result == ["Eiffel Tower", "Champ de Mars"]
    image = client.landmark_detection.call_args.kwargs["image"]
    assert isinstance(image, vision.Image)
    assert image.content == b"img"
    # one attempt, no client-side retry
    assert client.landmark_detection.call_args.kwargs["retry"] is None


def test_detect_labels_returns_descriptions_in_service_order():
    client = mock.Mock()
    client.label_detection.return_value = vision_response(labels=["beach", "sea", "sky"])

    assert VisionGateway(client).detect_labels(b"img") == ["beach", "sea", "sky"]


def test_nothing_detected_is_not_an_error():
    client = mock.Mock()
    client.landmark_detection.return_value = vision_response()
    client.label_detection.return_value = vision_response()
    gateway = VisionGateway(client)

    assert gateway.detect_landmarks(b"img") == []
    assert gateway.detect_labels(b"img") == []


def test_service_failure_becomes_classification_error():
    client = mock.Mock()
    client.label_detection.side_effect = ServiceUnavailable("backend down")

    with pytest.raises(ClassificationError, match="label detection"):
        VisionGateway(client).detect_labels(b"img")


def test_network_failure_becomes_classification_error():
    client = mock.Mock()
    client.landmark_detection.side_effect = ConnectionResetError("reset by peer")

    with pytest.raises(ClassificationError):
        VisionGateway(client).detect_landmarks(b"img")


def test_credential_failure_becomes_classification_error():
    client = mock.Mock()
    client.label_detection.side_effect = TransportError("token endpoint unreachable")

    with pytest.raises(ClassificationError, match="token endpoint unreachable"):
        VisionGateway(client).detect_labels(b"img")


def test_error_inside_response_becomes_classification_error():
    client = mock.Mock()
    client.landmark_detection.return_value = vision_response(error="Bad image data.")

    with pytest.raises(ClassificationError, match="Bad image data"):
        VisionGateway(client).detect_landmarks(b"img")


# -------- Storage --------
@pytest.fixture
def gcs_client():
    client = mock.Mock()
    bucket = client.bucket.return_value
    blob = bucket.blob.return_value
    blob.public_url = "https://storage.googleapis.com/traveler/trip_images/paris.jpg-1700000000000"
    return client


def test_storage_requires_bucket_name(gcs_client):
    with pytest.raises(ValueError):
        StorageGateway(gcs_client, None)


def test_upload_namespaces_key_and_returns_public_url(gcs_client):
    gateway = StorageGateway(gcs_client, "traveler", timeout=10)

    url = gateway.upload(b"bytes", "image/jpeg", "paris.jpg", "trip_images")

    gcs_client.bucket.assert_called_once_with("traveler")
    bucket = gcs_client.bucket.return_value
    (blob_name,), _ = bucket.blob.call_args
    assert re.fullmatch(r"trip_images/paris\.jpg-\d{13}", blob_name)
    bucket.blob.return_value.upload_from_string.assert_called_once_with(
        b"bytes", content_type="image/jpeg", timeout=10, retry=None
    )
    assert url == bucket.blob.return_value.public_url


def test_upload_keys_differ_over_time(gcs_client):
    gateway = StorageGateway(gcs_client, "traveler")
    bucket = gcs_client.bucket.return_value

    with mock.patch("services.storage.time") as clock:
        clock.time.side_effect = [1700000000.0, 1700000002.5]
        gateway.upload(b"a", "image/jpeg", "same.jpg", "trip_images")
        gateway.upload(b"b", "image/jpeg", "same.jpg", "trip_images")

    names = [c.args[0] for c in bucket.blob.call_args_list]
    assert names == ["trip_images/same.jpg-1700000000000", "trip_images/same.jpg-1700000002500"]


def test_upload_sanitises_file_name(gcs_client):
    gateway = StorageGateway(gcs_client, "traveler")

    gateway.upload(b"a", "image/png", "../../etc/my photo.png", "profile_images")

    (blob_name,), _ = gcs_client.bucket.return_value.blob.call_args
    assert blob_name.startswith("profile_images/etc_my_photo.png-")


def test_upload_failure_is_not_retried(gcs_client):
    blob = gcs_client.bucket.return_value.blob.return_value
    blob.upload_from_string.side_effect = TimeoutError("timed out")

    with pytest.raises(UploadError):
        StorageGateway(gcs_client, "traveler").upload(b"a", "image/jpeg", "x.jpg", "trip_images")

    assert blob.upload_from_string.call_count == 1


def test_upload_passes_no_retry_to_the_sdk(gcs_client):
    blob = gcs_client.bucket.return_value.blob.return_value

    StorageGateway(gcs_client, "traveler").upload(b"a", "image/jpeg", "x.jpg", "trip_images")

    assert blob.upload_from_string.call_args.kwargs["retry"] is None


def test_expired_credentials_become_upload_error(gcs_client):
    blob = gcs_client.bucket.return_value.blob.return_value
    blob.upload_from_string.side_effect = RefreshError("token expired")

    with pytest.raises(UploadError, match="token expired"):
        StorageGateway(gcs_client, "traveler").upload(b"a", "image/jpeg", "x.jpg", "trip_images")

    assert blob.upload_from_string.call_count == 1


def test_delete_removes_blob_named_by_url(gcs_client):
    gateway = StorageGateway(gcs_client, "traveler")

    assert gateway.delete("https://storage.googleapis.com/traveler/trip_images/x.jpg-1") is True
    bucket = gcs_client.bucket.return_value
    bucket.blob.assert_called_with("trip_images/x.jpg-1")
    bucket.blob.return_value.delete.assert_called_once_with(timeout=10, retry=None)


def test_delete_skips_foreign_urls_and_swallows_failures(gcs_client):
    gateway = StorageGateway(gcs_client, "traveler")
    assert gateway.delete("https://example.com/x.jpg") is False

    gcs_client.bucket.return_value.blob.return_value.delete.side_effect = ServiceUnavailable("down")
    assert gateway.delete("https://storage.googleapis.com/traveler/trip_images/x.jpg-1") is False

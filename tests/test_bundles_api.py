from __future__ import annotations

import io
import json
from zipfile import ZipFile

import pytest
from fastapi.testclient import TestClient

from review_bundler.api.main import app

CONFIG = json.dumps(
    [
        {"Review Test": "Group A", "Links": ["folder/update_file.txt", "other/file2.txt"]},
        {"Review Text": "Extras", "Links": ["missing.txt"]},
    ]
).encode()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def source_zip(make_zip) -> bytes:
    return make_zip(
        [
            ("src/folder/update_file.txt", b"update me"),
            ("src/other/file2.txt", b"insert me"),
            ("src/ignored.txt", b"-"),
        ]
    )


def _files(archive: bytes, config: bytes = CONFIG, archive_name: str = "source.zip") -> dict:
    return {
        "archive": (archive_name, archive, "application/zip"),
        "config": ("config.json", config, "application/json"),
    }


def test_create_bundle_returns_zip(client: TestClient, source_zip: bytes) -> None:
    response = client.post("/api/bundles", files=_files(source_zip), data={"batch_id": "B 1"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == (
        'attachment; filename="B_1_processed_files.zip"'
    )
    assert response.headers["x-bundle-files"] == "2"
    assert response.headers["x-bundle-groups"] == "2"

    with ZipFile(io.BytesIO(response.content)) as archive:
        assert sorted(archive.namelist()) == [
            "Group_A/",
            "Group_A/file2.txt",
            "Group_A/update_file.txt",
        ]
        assert archive.read("Group_A/file2.txt") == b"insert me"


def test_create_bundle_from_tar(client: TestClient, make_tar) -> None:
    data = make_tar([("folder/update_file.txt", b"u")])
    files = {
        "archive": ("source.tar", data, "application/x-tar"),
        "config": ("config.json", CONFIG, "application/json"),
    }

    response = client.post("/api/bundles", files=files, data={"batch_id": "tar"})

    assert response.status_code == 200
    assert response.headers["x-bundle-files"] == "1"


def test_blank_batch_id_is_rejected(client: TestClient, source_zip: bytes) -> None:
    response = client.post("/api/bundles", files=_files(source_zip), data={"batch_id": "   "})

    assert response.status_code == 400
    assert "batch" in response.json()["detail"].lower()


def test_missing_batch_id_is_a_validation_error(client: TestClient, source_zip: bytes) -> None:
    response = client.post("/api/bundles", files=_files(source_zip))
    assert response.status_code == 422


def test_non_array_config_returns_400(client: TestClient, source_zip: bytes) -> None:
    response = client.post(
        "/api/bundles",
        files=_files(source_zip, config=b'{"Review Test": "G"}'),
        data={"batch_id": "B1"},
    )
    assert response.status_code == 400


def test_non_json_config_upload_returns_400(client: TestClient, source_zip: bytes) -> None:
    files = {
        "archive": ("source.zip", source_zip, "application/zip"),
        "config": ("config.txt", CONFIG, "text/plain"),
    }

    response = client.post("/api/bundles", files=files, data={"batch_id": "B1"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a valid JSON file"


def test_unsupported_archive_type_returns_400(client: TestClient) -> None:
    files = {
        "archive": ("source.rar", b"rar!", "application/octet-stream"),
        "config": ("config.json", CONFIG, "application/json"),
    }

    response = client.post("/api/bundles", files=files, data={"batch_id": "B1"})

    assert response.status_code == 400
    assert "ZIP or TAR" in response.json()["detail"]


def test_corrupt_archive_returns_422(client: TestClient) -> None:
    response = client.post(
        "/api/bundles", files=_files(b"definitely not a zip"), data={"batch_id": "B1"}
    )
    assert response.status_code == 422


def test_preview_reports_stats_and_log(client: TestClient, source_zip: bytes) -> None:
    response = client.post("/api/bundles/preview", files=_files(source_zip))

    assert response.status_code == 200
    data = response.json()
    assert data["file_count"] == 2
    group_a, extras = data["groups"]
    assert group_a["name"] == "Group_A"
    assert (group_a["insert_count"], group_a["update_count"]) == (1, 1)
    assert group_a["files"] == [
        {"name": "update_file.txt", "operation": "update"},
        {"name": "file2.txt", "operation": "insert"},
    ]
    assert extras == {
        "name": "Extras",
        "file_count": 0,
        "insert_count": 0,
        "update_count": 0,
        "files": [],
    }
    assert any("File not found: missing.txt" in line for line in data["log"])


def test_tree_endpoint_returns_nested_folders(client: TestClient, source_zip: bytes) -> None:
    response = client.post(
        "/api/bundles/tree",
        files={"archive": ("source.zip", source_zip, "application/zip")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "source.zip"
    assert data["file_count"] == 3
    (root,) = data["tree"]
    assert root["type"] == "folder"
    assert root["name"] == "src"
    assert root["stats"] == {"empty_count": 0, "non_empty_count": 3, "total_count": 3}
    child_names = [child["name"] for child in root["children"]]
    assert child_names == ["folder", "other", "ignored.txt"]


def test_tree_endpoint_rejects_corrupt_archive(client: TestClient) -> None:
    response = client.post(
        "/api/bundles/tree",
        files={"archive": ("broken.zip", b"nope", "application/zip")},
    )
    assert response.status_code == 422


def test_encrypted_entry_does_not_break_endpoints(
    client: TestClient, make_zip, flag_encrypted
) -> None:
    source = make_zip([("locked/secret.txt", b"secret"), ("open/ok.txt", b"ok")])
    data = flag_encrypted(source, "locked/secret.txt")
    config = json.dumps([{"Review Test": "G", "Links": ["secret.txt", "ok.txt"]}]).encode()

    bundle = client.post(
        "/api/bundles", files=_files(data, config=config), data={"batch_id": "enc"}
    )
    tree = client.post(
        "/api/bundles/tree", files={"archive": ("source.zip", data, "application/zip")}
    )

    assert bundle.status_code == 200
    assert bundle.headers["x-bundle-files"] == "1"
    assert tree.status_code == 200
    assert tree.json()["file_count"] == 2

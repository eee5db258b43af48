import pytest

from contentkosh_api.core.errors import BadRequestError
from contentkosh_api.db.models import ContentType
from contentkosh_api.services import storage


def test_content_type_for_extensions():
    assert storage.content_type_for("notes.pdf") == ContentType.PDF
    assert storage.content_type_for("photo.JPEG") == ContentType.IMAGE
    assert storage.content_type_for("scan.png") == ContentType.IMAGE
    assert storage.content_type_for("archive.zip") is None
    assert storage.content_type_for("no-extension") is None


def test_mime_type_for():
    assert storage.mime_type_for("/x/file-1.pdf") == "application/pdf"
    assert storage.mime_type_for("/x/file-1.jpg") == "image/jpeg"
    assert storage.mime_type_for("/x/file-1.bin") == "application/octet-stream"


def test_validate_file_path_stays_inside_upload_dir(upload_dir):
    storage.validate_file_path(str(upload_dir / "file-abc.pdf"), ContentType.PDF)

    with pytest.raises(BadRequestError) as exc:
        storage.validate_file_path(str(upload_dir / ".." / "escape.pdf"), ContentType.PDF)
    assert exc.value.message == "Invalid file path"

    with pytest.raises(BadRequestError) as exc:
        storage.validate_file_path(str(upload_dir / "file-abc.png"), ContentType.PDF)
    assert exc.value.message == "File extension does not match content type"


def test_validate_upload_respects_allowed_types(upload_dir, monkeypatch):
    monkeypatch.setenv("ALLOWED_FILE_TYPES", "PDF")
    storage.validate_upload(ContentType.PDF, 10)
    with pytest.raises(BadRequestError) as exc:
        storage.validate_upload(ContentType.IMAGE, 10)
    assert exc.value.message == "File type is not allowed"


def test_validate_upload_image_size(upload_dir, monkeypatch):
    monkeypatch.setenv("MAX_IMAGE_SIZE_MB", "2")
    storage.validate_upload(ContentType.IMAGE, 2 * storage.BYTES_IN_MB)
    with pytest.raises(BadRequestError) as exc:
        storage.validate_upload(ContentType.IMAGE, 2 * storage.BYTES_IN_MB + 1)
    assert exc.value.message == "Image file size cannot exceed 2MB"


def test_remove_missing_file_is_quiet(tmp_path):
    storage.remove_file(str(tmp_path / "already-gone.pdf"))

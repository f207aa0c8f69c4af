import base64

import pytest
from PIL import Image

from infrastructure.photo_loader import PhotoLoadError, load_photo


@pytest.mark.parametrize(
    "suffix,fmt,mime",
    [(".jpg", "JPEG", "image/jpeg"), (".png", "PNG", "image/png")],
)
def test_load_photo_detects_format_and_encodes(tmp_path, suffix, fmt, mime):
    path = tmp_path / f"product{suffix}"
    Image.new("RGB", (8, 6), color=(231, 76, 60)).save(path, format=fmt)

    photo = load_photo(path)

    assert photo.path == path
    assert photo.mime_type == mime
    assert base64.b64decode(photo.base64_data) == path.read_bytes()
    assert photo.data_url.startswith(f"data:{mime};base64,")


def test_format_is_detected_from_content_not_extension(tmp_path):
    path = tmp_path / "mislabelled.jpg"
    Image.new("RGB", (4, 4)).save(path, format="PNG")
    assert load_photo(path).mime_type == "image/png"


def test_missing_file_raises(tmp_path):
    with pytest.raises(PhotoLoadError):
        load_photo(tmp_path / "absent.jpg")


def test_not_an_image_raises(tmp_path):
    path = tmp_path / "notes.jpg"
    path.write_text("pas une image", encoding="utf-8")
    with pytest.raises(PhotoLoadError):
        load_photo(path)


def test_unsupported_format_raises(tmp_path):
    path = tmp_path / "product.bmp"
    Image.new("RGB", (4, 4)).save(path, format="BMP")
    with pytest.raises(PhotoLoadError):
        load_photo(path)

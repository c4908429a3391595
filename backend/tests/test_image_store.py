"""Tests for the filesystem Image Store."""

import base64
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from conftest import make_image_bytes, to_data_url
from services.image_store.store import ImageStore, ImageStoreSettings, decode_image_payload
from shared.errors import BadRequestError


def files_under(root: Path) -> list[Path]:
    return sorted(path for path in root.rglob("*") if path.is_file())


class TestDecodeImagePayload:
    def test_data_url_png(self) -> None:
        raw = make_image_bytes()
        data, extension = decode_image_payload(to_data_url(raw))
        assert data == raw
        assert extension == "png"

    def test_jpeg_maps_to_jpg(self) -> None:
        data, extension = decode_image_payload(to_data_url(make_image_bytes(image_format="JPEG"), "jpeg"))
        assert extension == "jpg"
        assert data

    def test_bare_base64_defaults_to_png(self) -> None:
        raw = make_image_bytes()
        _, extension = decode_image_payload(base64.b64encode(raw).decode("ascii"))
        assert extension == "png"

    @pytest.mark.parametrize(
        "payload",
        [
            "data:text/plain;base64,aGVsbG8=",
            "data:image/png,not-base64-marker",
            "data:image/bmp;base64,aGVsbG8=",
            "data:image/png;base64,***not base64***",
            "",
        ],
    )
    def test_malformed_payloads_are_bad_requests(self, payload: str) -> None:
        with pytest.raises(BadRequestError):
            decode_image_payload(payload)


class TestImageStore:
    @pytest.mark.asyncio
    async def test_store_writes_original_and_thumbnail(self, image_store: ImageStore) -> None:
        stored = await image_store.store(to_data_url(make_image_bytes(640, 360)), "presentations/user-1")

        original = image_store.root / "presentations" / "user-1" / f"{stored.asset_id}.png"
        thumbnail = image_store.root / "thumbnails" / f"{stored.asset_id}_thumb.png"
        assert original.exists()
        assert thumbnail.exists()
        assert (stored.width, stored.height) == (640, 360)
        assert stored.url == f"http://testserver/uploads/presentations/user-1/{stored.asset_id}.png"
        assert stored.thumbnail_url == f"http://testserver/uploads/thumbnails/{stored.asset_id}_thumb.png"

        with Image.open(thumbnail) as image:
            assert image.size == (300, 169)

    @pytest.mark.asyncio
    async def test_jpeg_thumbnail_keeps_extension(self, image_store: ImageStore) -> None:
        stored = await image_store.store(to_data_url(make_image_bytes(image_format="JPEG"), "jpeg"))

        assert stored.url.endswith(f"/uploads/slides/{stored.asset_id}.jpg")
        assert (image_store.root / "thumbnails" / f"{stored.asset_id}_thumb.jpg").exists()

    @pytest.mark.asyncio
    async def test_unreadable_image_falls_back_to_original(self, image_store: ImageStore) -> None:
        raw = b"definitely not an image"
        stored = await image_store.store(base64.b64encode(raw).decode("ascii"))

        thumbnail = image_store.root / "thumbnails" / f"{stored.asset_id}_thumb.png"
        assert thumbnail.read_bytes() == raw
        assert (stored.width, stored.height) == (1920, 1080)

    @pytest.mark.asyncio
    async def test_thumbnail_size_comes_from_settings(self, tmp_path: Path) -> None:
        store = ImageStore(
            ImageStoreSettings(root=tmp_path, base_url="http://cdn.local/", thumbnail_width=64, thumbnail_height=36)
        )
        stored = await store.store(to_data_url(make_image_bytes()))

        with Image.open(tmp_path / "thumbnails" / f"{stored.asset_id}_thumb.png") as image:
            assert image.size == (64, 36)
        assert stored.url.startswith("http://cdn.local/uploads/")

    @pytest.mark.asyncio
    async def test_namespace_cannot_escape_root(self, image_store: ImageStore) -> None:
        stored = await image_store.store(to_data_url(make_image_bytes()), "../../etc")

        assert (image_store.root / "etc" / f"{stored.asset_id}.png").exists()
        assert "/../" not in stored.url

    @pytest.mark.asyncio
    async def test_invalid_payload_writes_nothing(self, image_store: ImageStore) -> None:
        with pytest.raises(BadRequestError):
            await image_store.store("data:image/png;base64,@@@")
        assert not image_store.root.exists() or files_under(image_store.root) == []

    @pytest.mark.asyncio
    async def test_thumbnail_write_failure_removes_original(self, image_store: ImageStore) -> None:
        with patch.object(image_store, "_write_thumbnail", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                await image_store.store(to_data_url(make_image_bytes()), "presentations/user-1")

        assert files_under(image_store.root) == []

    @pytest.mark.asyncio
    async def test_delete_removes_original_and_thumbnail(self, image_store: ImageStore) -> None:
        stored = await image_store.store(to_data_url(make_image_bytes()), "presentations/user-1")

        assert await image_store.delete(stored.asset_id, "presentations/user-1") is True
        assert files_under(image_store.root) == []

    @pytest.mark.asyncio
    async def test_delete_missing_asset_is_not_an_error(self, image_store: ImageStore) -> None:
        assert await image_store.delete("does-not-exist") is True

    @pytest.mark.asyncio
    async def test_delete_rejects_path_like_ids(self, image_store: ImageStore) -> None:
        assert await image_store.delete("../secrets") is False
        assert await image_store.delete("") is False

    @pytest.mark.asyncio
    async def test_delete_swallows_filesystem_errors(self, image_store: ImageStore) -> None:
        stored = await image_store.store(to_data_url(make_image_bytes()))

        with patch("services.image_store.store.remove_if_exists", side_effect=PermissionError("denied")):
            assert await image_store.delete(stored.asset_id) is False

    @pytest.mark.asyncio
    async def test_delete_many_reports_failures(self, image_store: ImageStore) -> None:
        first = await image_store.store(to_data_url(make_image_bytes()))
        second = await image_store.store(to_data_url(make_image_bytes()))

        failed = await image_store.delete_many([first.asset_id, "../bad", second.asset_id])

        assert failed == ["../bad"]
        assert files_under(image_store.root) == []

"""Tests for shared helpers."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from shared.config import ServiceConfig
from shared.file_utils import ensure_directory, remove_if_exists, sanitize_filename, sanitize_namespace
from shared.logging_utils import mask_identifier, setup_logging
from shared.time_utils import ensure_utc, is_past, utcnow


class TestFileUtils:
    def test_sanitize_filename_invalid_chars(self) -> None:
        result = sanitize_filename('bad/file\\name:with*invalid"chars<>|?.png')
        for char in '<>:"/\\|?*':
            assert char not in result
        assert result.endswith(".png")

    def test_sanitize_namespace_drops_traversal(self) -> None:
        assert sanitize_namespace("presentations/user-1") == "presentations/user-1"
        assert sanitize_namespace("../../etc/./passwd") == "etc/passwd"
        assert sanitize_namespace("a\\b//c/") == "a/b/c"
        assert sanitize_namespace("") == ""

    def test_remove_if_exists(self, tmp_path: Path) -> None:
        ensure_directory(tmp_path / "nested" / "dir")
        target = tmp_path / "nested" / "dir" / "file.txt"
        target.write_text("x")

        assert remove_if_exists(target) is True
        assert remove_if_exists(target) is False


class TestTimeUtils:
    def test_ensure_utc_treats_naive_as_utc(self) -> None:
        naive = datetime(2024, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert ensure_utc(None) is None

    def test_ensure_utc_converts_offsets(self) -> None:
        aware = datetime(2024, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(aware) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_is_past(self) -> None:
        now = utcnow()
        assert is_past(now - timedelta(seconds=1), now)
        assert not is_past(now + timedelta(minutes=1), now)
        assert not is_past(None, now)


class TestLogging:
    def test_setup_logging_reuses_handlers(self) -> None:
        first = setup_logging("deckshare-test")
        second = setup_logging("deckshare-test", "DEBUG")
        assert first is second
        assert len(second.handlers) == 1

    def test_mask_identifier(self) -> None:
        assert mask_identifier("abcdefghij") == "abcd..."
        assert mask_identifier("abc") == "abc"
        assert mask_identifier(None) == "<none>"


class TestServiceConfig:
    def test_file_values_and_env_overrides(self, monkeypatch) -> None:
        service_config = ServiceConfig()
        service_config.set_file_config({"image_store": {"thumbnail_width": 120}})

        assert service_config.get_file_value("image_store.thumbnail_width", 300) == 120
        assert service_config.get_file_value("image_store.missing", "fallback") == "fallback"

        monkeypatch.setenv("APP_FLAG_IMAGE_STORE_THUMBNAIL_WIDTH", "400")
        assert service_config.get_file_value("image_store.thumbnail_width", 300) == 400

    def test_env_keys(self, monkeypatch) -> None:
        monkeypatch.setenv("MEDIA_ROOT", "/srv/media")
        monkeypatch.setenv("ALLOWED_ORIGINS", '["https://deck.example"]')
        service_config = ServiceConfig()

        assert service_config.get("media_root") == "/srv/media"
        assert service_config.get("allowed_origins") == ["https://deck.example"]
        assert service_config.get("expired_purge_interval_seconds") == 0

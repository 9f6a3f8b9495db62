#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for the manifest store and its line codec.
"""

import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch
import sys

import pytest

# Add the media_optim package to Python path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from media_optim.errors import ManifestParseError, ManifestReadError, ManifestWriteError
from media_optim.manifest.codec import (
    decode_identity, decode_reduction, encode_identity, encode_reduction, escape_field,
)
from media_optim.manifest.store import ManifestStore
from media_optim.models.identity import Identity, ReductionRecord
from media_optim.models.media_class import MediaClass


class TestStoreFixture:
    """Provides an empty manifest directory for each test."""

    @pytest.fixture
    def manifest_dir(self):
        root = Path(tempfile.mkdtemp(prefix="media_optim_manifest_"))
        yield root / ".optim"
        shutil.rmtree(root, ignore_errors=True)

    @pytest.fixture
    def store(self, manifest_dir):
        store = ManifestStore(manifest_dir)
        yield store
        store.close()


class TestCodec:
    """Line encoding of identities and reductions."""

    def test_encode_identity(self):
        identity = Identity("a.jpg", 1200, "abc123")
        assert encode_identity(identity) == "a.jpg|1200|abc123"

    def test_decode_plain_line(self):
        assert decode_identity("b.png|800|ff00") == Identity("b.png", 800, "ff00")

    def test_delimiter_in_name_is_escaped(self):
        identity = Identity("x|y.jpg", 10, "h")
        line = encode_identity(identity)
        assert line == "x\\|y.jpg|10|h"
        assert decode_identity(line) == identity

    def test_newline_and_backslash_in_name(self):
        identity = Identity("odd\\name\n.jpg", 10, "h")
        line = encode_identity(identity)
        assert "\n" not in line
        assert decode_identity(line) == identity

    def test_escape_field_leaves_plain_text(self):
        assert escape_field("holiday 2019.jpg") == "holiday 2019.jpg"

    def test_reduction_line(self):
        record = ReductionRecord(Identity("clip.mp4", 3_000_000, "h"), 2_000_000)
        line = encode_reduction(record)
        assert line == "clip.mp4|3000000|h|2000000"
        assert decode_reduction(line) == record

    @pytest.mark.parametrize("line", [
        "only-two|fields",
        "a.jpg|notanumber|h",
        "a.jpg|-5|h",
        "|10|h",
        "a.jpg|10|",
        "a.jpg|10|h|extra",
        "dangling\\",
    ])
    def test_malformed_identity_lines(self, line):
        with pytest.raises(ManifestParseError):
            decode_identity(line)

    def test_reduction_requires_four_fields(self):
        with pytest.raises(ManifestParseError):
            decode_reduction("a.jpg|10|h")


class TestManifestStore(TestStoreFixture):
    """Loading and appending manifests."""

    def test_load_missing_manifest_is_empty(self, store):
        """First run: no manifest directory yet."""
        assert store.load(MediaClass.IMAGE) == []
        assert not store.manifest_dir.exists()

    def test_append_creates_directory_and_file(self, store, manifest_dir):
        store.append(MediaClass.IMAGE, Identity("a.jpg", 1200, "h1"))

        path = manifest_dir / "image.man"
        assert path.exists()
        assert path.read_text() == "a.jpg|1200|h1\n"

    def test_append_order_is_preserved(self, store, manifest_dir):
        identities = [Identity(f"{i}.jpg", 100 + i, f"h{i}") for i in range(5)]
        for identity in identities:
            store.append(MediaClass.IMAGE, identity)
        store.close()

        assert ManifestStore(manifest_dir).load(MediaClass.IMAGE) == identities

    def test_classes_use_separate_files(self, store, manifest_dir):
        store.append(MediaClass.IMAGE, Identity("a.jpg", 1, "h"))
        store.append(MediaClass.VIDEO, Identity("v.mp4", 2, "h"))
        store.append(MediaClass.DOCUMENT, Identity("d.pdf", 3, "h"))
        store.close()

        assert sorted(p.name for p in manifest_dir.iterdir()) == ["doc.man", "image.man", "video.man"]
        assert store.load(MediaClass.VIDEO) == [Identity("v.mp4", 2, "h")]

    def test_duplicate_entries_are_tolerated(self, store):
        identity = Identity("a.jpg", 1200, "h1")
        store.append(MediaClass.IMAGE, identity)
        store.append(MediaClass.IMAGE, identity)
        assert store.load(MediaClass.IMAGE) == [identity, identity]

    def test_reduction_ledger(self, store, manifest_dir):
        record = ReductionRecord(Identity("clip.mp4", 3_000_000, "h"), 2_000_000)
        store.append_reduction(MediaClass.VIDEO, record)
        store.close()

        assert (manifest_dir / "video_reduction.man").read_text() == "clip.mp4|3000000|h|2000000\n"
        assert store.load_reductions(MediaClass.VIDEO) == [record]
        # The ledger never feeds change detection
        assert store.load(MediaClass.VIDEO) == []

    @pytest.mark.parametrize("saved", [0, -10])
    def test_non_positive_reduction_rejected(self, store, saved):
        with pytest.raises(ValueError):
            store.append_reduction(MediaClass.IMAGE, ReductionRecord(Identity("a.jpg", 1, "h"), saved))

    def test_malformed_lines_are_skipped(self, store, manifest_dir):
        manifest_dir.mkdir(parents=True)
        (manifest_dir / "image.man").write_text(
            "a.jpg|100|h1\n"
            "garbage line\n"
            "\n"
            "b.jpg|abc|h2\n"
            "c.jpg|300|h3\n"
        )
        assert store.load(MediaClass.IMAGE) == [Identity("a.jpg", 100, "h1"), Identity("c.jpg", 300, "h3")]

    def test_torn_last_line_is_terminated_before_append(self, store, manifest_dir):
        """A crash mid-write leaves a partial line; the next append must not extend it."""
        manifest_dir.mkdir(parents=True)
        (manifest_dir / "image.man").write_text("a.jpg|100|h1\nb.jpg|20")

        store.append(MediaClass.IMAGE, Identity("c.jpg", 300, "h3"))
        store.close()

        assert (manifest_dir / "image.man").read_text() == "a.jpg|100|h1\nb.jpg|20\nc.jpg|300|h3\n"
        # The torn entry has no hash and is treated as never optimized
        assert store.load(MediaClass.IMAGE) == [Identity("a.jpg", 100, "h1"), Identity("c.jpg", 300, "h3")]

    def test_non_utf8_names_round_trip(self, store, manifest_dir):
        name = b"caf\xe9.jpg".decode("utf-8", errors="surrogateescape")
        identity = Identity(name, 500, "h")
        store.append(MediaClass.IMAGE, identity)
        store.close()
        assert ManifestStore(manifest_dir).load(MediaClass.IMAGE) == [identity]

    def test_write_failure_raises(self, manifest_dir):
        """A file where the manifest directory should be makes appends fail."""
        manifest_dir.parent.mkdir(parents=True, exist_ok=True)
        manifest_dir.write_text("not a directory")
        store = ManifestStore(manifest_dir)

        with pytest.raises(ManifestWriteError):
            store.append(MediaClass.IMAGE, Identity("a.jpg", 100, "h"))

    def test_fsync_failure_raises(self, store):
        with patch("media_optim.manifest.store.os.fsync", side_effect=OSError(5, "Input/output error")):
            with pytest.raises(ManifestWriteError) as exc_info:
                store.append(MediaClass.IMAGE, Identity("a.jpg", 100, "h"))
        assert "Input/output error" in str(exc_info.value)

    def test_unreadable_manifest_raises(self, store, manifest_dir):
        manifest_dir.mkdir(parents=True)
        (manifest_dir / "image.man").write_text("a.jpg|100|h1\n")
        with patch.object(Path, "open", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(ManifestReadError):
                store.load(MediaClass.IMAGE)


class TestDisabledStore(TestStoreFixture):
    """Manifest usage turned off."""

    def test_disabled_store_loads_nothing_and_writes_nothing(self, manifest_dir):
        manifest_dir.mkdir(parents=True)
        (manifest_dir / "image.man").write_text("a.jpg|100|h1\n")
        store = ManifestStore(manifest_dir, enabled=False)

        assert store.load(MediaClass.IMAGE) == []
        store.append(MediaClass.IMAGE, Identity("b.jpg", 200, "h2"))
        store.append_reduction(MediaClass.IMAGE, ReductionRecord(Identity("b.jpg", 200, "h2"), 50))
        store.close()

        assert (manifest_dir / "image.man").read_text() == "a.jpg|100|h1\n"
        assert not (manifest_dir / "image_reduction.man").exists()

    def test_disabled_store_still_notifies_listeners(self, manifest_dir):
        store = ManifestStore(manifest_dir, enabled=False)
        seen = []
        store.subscribe(MediaClass.IMAGE, seen.append)
        store.append(MediaClass.IMAGE, Identity("b.jpg", 200, "h2"))
        assert seen == [Identity("b.jpg", 200, "h2")]


class TestListeners(TestStoreFixture):
    """Append notifications."""

    def test_listener_sees_only_its_class(self, store):
        seen = []
        store.subscribe(MediaClass.VIDEO, seen.append)
        store.append(MediaClass.IMAGE, Identity("a.jpg", 1, "h"))
        store.append(MediaClass.VIDEO, Identity("v.mp4", 2, "h"))
        assert seen == [Identity("v.mp4", 2, "h")]

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(MediaClass.IMAGE, seen.append)
        store.append(MediaClass.IMAGE, Identity("a.jpg", 1, "h"))
        unsubscribe()
        store.append(MediaClass.IMAGE, Identity("b.jpg", 1, "h"))
        assert len(seen) == 1

    def test_listener_not_called_when_write_fails(self, store):
        seen = []
        store.subscribe(MediaClass.IMAGE, seen.append)
        with patch("media_optim.manifest.store.os.fsync", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(ManifestWriteError):
                store.append(MediaClass.IMAGE, Identity("a.jpg", 1, "h"))
        assert seen == []

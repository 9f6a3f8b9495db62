#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
End-to-end tests for optimization runs, settings and progress reporting.
"""

import logging
from pathlib import Path
from unittest.mock import patch
import sys

import pytest

# Add the media_optim package to Python path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from media_optim.config import OptimizeSettings, TIMEOUT_ENV_VAR
from media_optim.dispatch.dispatcher import Dispatcher
from media_optim.errors import DependencyError, OptimizerInvocationError
from media_optim.manifest.store import ManifestStore
from media_optim.models.identity import Identity
from media_optim.models.media_class import MediaClass
from media_optim.progress import ProgressObserver
from media_optim.runner import OptimizationRunner, build_dispatcher
from media_optim.scanning.fingerprint import Fingerprinter
from media_optim.scanning.scanner import FingerprintScanner
from media_optim.tests.fixtures.media_tree import (
    FakeImageOptimizer, FakeSingleFileOptimizer, create_media_tree, remove_tree, write_file,
)


class TestRunFixture:
    """Builds runners wired to fake optimizers over a temporary tree."""

    @pytest.fixture
    def media_root(self):
        root = create_media_tree()
        yield root
        remove_tree(root)

    def make_runner(self, settings: OptimizeSettings, image_optimizer=None):
        store = ManifestStore(settings.manifest_dir, enabled=settings.manifest)
        scanner = FingerprintScanner(Fingerprinter(settings.hash_algorithm), hash_workers=2)
        dispatcher = Dispatcher(
            store, scanner,
            image_optimizer=image_optimizer or FakeImageOptimizer(),
            video_transcoder=FakeSingleFileOptimizer("HandBrakeCLI", ratio=0.9),
            document_compressor=FakeSingleFileOptimizer("gs", ratio=0.9),
            chunk_size=settings.chunk_size,
        )
        return OptimizationRunner(settings, store=store, scanner=scanner, dispatcher=dispatcher)

    def settings(self, root: Path, **overrides) -> OptimizeSettings:
        options = {"path": root, "silent": True, "dependency_check": False}
        options.update(overrides)
        return OptimizeSettings(**options)


class TestOptimizationRunner(TestRunFixture):
    """Incremental behaviour across runs."""

    def test_first_run_processes_every_candidate(self, media_root):
        summary = self.make_runner(self.settings(media_root)).run()

        by_class = {r.media_class: r for r in summary.results}
        assert by_class[MediaClass.IMAGE].files_processed == 3
        assert by_class[MediaClass.VIDEO].files_processed == 1
        assert by_class[MediaClass.DOCUMENT].files_processed == 1
        assert summary.files_processed == 5
        assert summary.bytes_saved > 0

        manifest_dir = media_root / ".optim"
        assert sorted(p.name for p in manifest_dir.iterdir()) == [
            "doc.man", "doc_reduction.man", "image.man", "image_reduction.man",
            "video.man", "video_reduction.man",
        ]

    def test_second_run_is_idempotent(self, media_root):
        self.make_runner(self.settings(media_root)).run()
        image_optimizer = FakeImageOptimizer()

        summary = self.make_runner(self.settings(media_root), image_optimizer=image_optimizer).run()

        assert summary.files_processed == 0
        assert image_optimizer.calls == []
        image = summary.results[0]
        assert image.files_found == 3
        assert image.files_previously_optimized == 3

    def test_unchanged_results_are_still_remembered(self, media_root):
        untouched = FakeImageOptimizer(untouched={"a.jpg", "b.PNG", "c.gif"})
        first = self.make_runner(self.settings(media_root, video=False, doc=False), untouched).run()
        assert first.files_processed == 3
        assert first.files_modified == 0

        second = self.make_runner(self.settings(media_root, video=False, doc=False)).run()
        assert second.files_processed == 0

    def test_changed_file_is_reprocessed(self, media_root):
        self.make_runner(self.settings(media_root)).run()
        write_file(media_root / "photos" / "a.jpg", 4_000, seed="new upload")

        image_optimizer = FakeImageOptimizer()
        summary = self.make_runner(self.settings(media_root), image_optimizer=image_optimizer).run()

        assert summary.files_processed == 1
        assert [p.name for p in image_optimizer.calls[0]] == ["a.jpg"]

    def test_new_file_is_processed(self, media_root):
        self.make_runner(self.settings(media_root)).run()
        write_file(media_root / "photos" / "2020" / "new.jpeg", 900)

        summary = self.make_runner(self.settings(media_root)).run()
        assert summary.files_processed == 1

    def test_failure_keeps_completed_units_for_next_run(self, media_root):
        settings = self.settings(media_root, video=False, doc=False, chunk_size=1)
        with pytest.raises(OptimizerInvocationError):
            self.make_runner(settings, FakeImageOptimizer(fail_on_call=3)).run()

        image_optimizer = FakeImageOptimizer()
        summary = self.make_runner(settings, image_optimizer).run()
        assert summary.files_processed == 1
        assert len(image_optimizer.calls) == 1

    def test_disabled_classes_are_not_scanned(self, media_root):
        summary = self.make_runner(self.settings(media_root, image=False, doc=False)).run()
        assert [r.media_class for r in summary.results] == [MediaClass.VIDEO]

    def test_manifest_disabled_reprocesses_everything(self, media_root, caplog):
        settings = self.settings(media_root, manifest=False)
        with caplog.at_level(logging.WARNING):
            first = self.make_runner(settings).run()
        second = self.make_runner(settings).run()

        assert first.files_processed == second.files_processed == 5
        assert not (media_root / ".optim").exists()
        assert any("Manifest disabled" in r.message for r in caplog.records)

    def test_single_file_mode(self, media_root):
        target = media_root / "videos" / "clip.mp4"
        summary = self.make_runner(self.settings(media_root, file=target)).run()

        assert summary.files_processed == 1
        manifest = ManifestStore(media_root / "videos" / ".optim").load(MediaClass.VIDEO)
        assert [i.relative_name for i in manifest] == ["clip.mp4"]

    def test_dependency_check_runs_before_scanning(self, media_root):
        runner = self.make_runner(self.settings(media_root, dependency_check=True))
        with patch("media_optim.optimizers.tools.shutil.which", return_value=None):
            with patch.object(FingerprintScanner, "scan") as mock_scan:
                with pytest.raises(DependencyError):
                    runner.run()
        mock_scan.assert_not_called()

    def test_missing_root_fails(self, media_root):
        from media_optim.errors import ScanError
        with pytest.raises(ScanError):
            self.make_runner(self.settings(media_root / "missing")).run()

    def test_banner_is_printed_unless_silent(self, media_root):
        with patch("builtins.print") as mock_print:
            self.make_runner(self.settings(media_root, silent=False)).run()
        printed = [str(call.args[0]) for call in mock_print.call_args_list if call.args]
        assert any("MEDIA OPTIMIZER RUN" in line for line in printed)
        assert any(line.startswith("COMPLETE") for line in printed)

        with patch("builtins.print") as mock_print:
            self.make_runner(self.settings(media_root)).run()
        mock_print.assert_not_called()

    def test_build_dispatcher_uses_settings(self, media_root, monkeypatch):
        monkeypatch.delenv(TIMEOUT_ENV_VAR, raising=False)
        settings = self.settings(media_root, chunk_size=4, image_max_size=False, video_quality=25)
        store = ManifestStore(settings.manifest_dir)
        dispatcher = build_dispatcher(settings, store, FingerprintScanner())

        assert dispatcher.chunk_size == 4
        assert dispatcher.image_optimizer.downscaler is None
        assert dispatcher.video_transcoder.quality == 25
        assert dispatcher.video_transcoder.timeout == settings.video_timeout


class TestOptimizeSettings:
    """Option validation and derived values."""

    def test_defaults(self, tmp_path):
        settings = OptimizeSettings(path=tmp_path)
        assert settings.chunk_size == 8
        assert settings.lookup_workers == 8
        assert settings.manifest_dir == tmp_path / ".optim"

    def test_single_file_manifest_lives_beside_file(self, tmp_path):
        settings = OptimizeSettings(path=tmp_path, file=tmp_path / "sub" / "a.pdf")
        assert settings.manifest_dir == tmp_path / "sub" / ".optim"

    @pytest.mark.parametrize("overrides", [
        {"chunk_size": 0},
        {"lookup_workers": 0},
        {"hash_algorithm": "sha1"},
        {"image_lossy_quality": 101},
    ])
    def test_invalid_options(self, tmp_path, overrides):
        with pytest.raises(ValueError):
            OptimizeSettings(path=tmp_path, **overrides)

    def test_timeout_override_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv(TIMEOUT_ENV_VAR, "5")
        assert OptimizeSettings(path=tmp_path).timeouts() == {"image": 5.0, "video": 5.0, "doc": 5.0}

    def test_timeouts_without_override(self, tmp_path, monkeypatch):
        monkeypatch.delenv(TIMEOUT_ENV_VAR, raising=False)
        timeouts = OptimizeSettings(path=tmp_path, doc_timeout=60).timeouts()
        assert timeouts["doc"] == 60
        assert timeouts["video"] == 6 * 60 * 60


class TestProgressObserver:
    """Progress counting from manifest appends."""

    def test_counts_appends_for_its_class(self, tmp_path):
        store = ManifestStore(tmp_path / ".optim")
        with ProgressObserver("Image Processing", total=3, disable=True).attach(store, MediaClass.IMAGE) as observer:
            for i in range(3):
                store.append(MediaClass.IMAGE, Identity(f"{i}.jpg", 100, "h"))
            store.append(MediaClass.VIDEO, Identity("v.mp4", 100, "h"))
        store.close()

        assert observer.count == 3

    def test_close_unsubscribes(self, tmp_path):
        store = ManifestStore(tmp_path / ".optim", enabled=False)
        observer = ProgressObserver("Video Processing", total=1, disable=True).attach(store, MediaClass.VIDEO)
        store.append(MediaClass.VIDEO, Identity("v.mp4", 100, "h"))
        observer.close()
        store.append(MediaClass.VIDEO, Identity("w.mp4", 100, "h"))

        assert observer.count == 1
        observer.close()

"""Per-run scratch workspace and its cleanup."""

from __future__ import annotations

import os
import shutil
import tempfile
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from adforge.config import settings
from adforge.models.asset import UploadedAsset

logger = structlog.get_logger()


def new_run_id() -> str:
    """Timestamp-qualified run id, unique across concurrent runs."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


@dataclass
class RunWorkspace:
    """Every file a run creates, so cleanup can remove them on any exit path.

    Scratch members live under ``root``; the final artifact lives in the
    output directory and survives only a successful run.
    """

    run_id: str
    root: Path
    output_dir: Path
    uploads: list[Path] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        run_id: str | None = None,
        output_dir: str | None = None,
        scratch_dir: str | None = None,
    ) -> RunWorkspace:
        run_id = run_id or new_run_id()
        base = scratch_dir if scratch_dir is not None else (settings.scratch_dir or None)
        out = Path(output_dir or settings.output_base_dir)
        out.mkdir(parents=True, exist_ok=True)
        if base:
            Path(base).mkdir(parents=True, exist_ok=True)
        root = Path(tempfile.mkdtemp(prefix=f"adforge-{run_id}-", dir=base))
        ws = cls(run_id=run_id, root=root, output_dir=out)
        try:
            ws.images_dir.mkdir()
            ws.clips_dir.mkdir()
        except OSError:
            shutil.rmtree(root, ignore_errors=True)
            raise
        return ws

    @property
    def images_dir(self) -> Path:
        return self.root / "images"

    @property
    def clips_dir(self) -> Path:
        return self.root / "clips"

    @property
    def manifest_path(self) -> Path:
        return self.root / "concat.txt"

    @property
    def voiceover_path(self) -> Path:
        return self.root / "voiceover.mp3"

    @property
    def silent_video_path(self) -> Path:
        return self.root / "video-no-audio.mp4"

    @property
    def final_file_name(self) -> str:
        return f"ad-{self.run_id}.mp4"

    @property
    def final_path(self) -> Path:
        return self.output_dir / self.final_file_name

    def image_path(self, index: int, suffix: str = ".jpg") -> Path:
        # zero-padded so lexical order == display order
        return self.images_dir / f"{index:03d}{suffix}"

    def clip_path(self, index: int) -> Path:
        return self.clips_dir / f"{index:03d}.mp4"

    def adopt_uploads(self, assets: list[UploadedAsset]) -> None:
        self.uploads.extend(Path(a.path) for a in assets)

    def cleanup(self, keep_final: bool) -> None:
        """Delete scratch files and uploads; the final file too unless *keep_final*."""
        shutil.rmtree(self.root, ignore_errors=True)
        for upload in self.uploads:
            _unlink(upload)
        if not keep_final:
            _unlink(self.final_path)
        logger.info(
            "workspace.cleaned",
            run_id=self.run_id,
            kept_final=keep_final,
            uploads_removed=len(self.uploads),
        )


def discard_uploads(assets: list[UploadedAsset]) -> None:
    """Delete upload files that never made it into a workspace."""
    for asset in assets:
        _unlink(Path(asset.path))


def _unlink(path: Path) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("workspace.unlink_failed", path=str(path), exc_info=True)

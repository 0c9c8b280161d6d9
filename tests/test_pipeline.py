"""End-to-end pipeline runs against fake capabilities."""

import asyncio
from pathlib import Path

import pytest

from adforge.config import settings
from adforge.errors import MediaToolError, PipelineError, RunCancelledError, SynthesisError
from adforge.models.run import VideoRequest
from adforge.orchestrator import run_pipeline
from adforge.planning.allocator import estimate_speech_duration
from adforge.planning.sanitizer import sanitize
from adforge.tools.capabilities import Capabilities
from adforge.workspace import RunWorkspace
from conftest import FakeMediaTool

SCRIPT = (
    "[Scene 1: Kitchen]\n"
    "Narrator: Cook like a chef in this kitchen with granite countertops.\n"
    "Then unwind in a bedroom retreat made for rest."
)


def _request(assets, **overrides):
    fields = {"assets": assets, "script": SCRIPT, "music": "none"}
    fields.update(overrides)
    return VideoRequest(**fields)


def _clip_durations(media_tool):
    return [float(c[c.index("-t") + 1]) for c in media_tool.calls_with("-loop")]


def _assert_cleaned_up(dirs, assets):
    assert list(dirs["scratch"].iterdir()) == []
    for asset in assets:
        assert not Path(asset.path).exists()


class TestSuccessfulRun:
    def test_produces_final_video_and_cleans_scratch(self, dirs, make_asset, capabilities, media_tool, synthesizer):
        assets = [make_asset("bedroom"), make_asset("kitchen")]
        result = asyncio.run(run_pipeline(_request(assets), capabilities))

        assert result.video_file.startswith("ad-") and result.video_file.endswith(".mp4")
        assert result.video_url == f"/output/{result.video_file}"
        assert (dirs["output"] / result.video_file).is_file()
        assert result.size_bytes == len(b"fake-media")
        assert result.timing_strategy == "keyword"
        # script order, not upload order
        assert [t.category_label for t in result.timing] == ["kitchen", "bedroom"]
        _assert_cleaned_up(dirs, assets)

    def test_synthesizes_the_sanitized_script(self, dirs, make_asset, capabilities, synthesizer):
        asyncio.run(run_pipeline(_request([make_asset("kitchen")], voice="nova"), capabilities))
        assert synthesizer.calls == [(sanitize(SCRIPT), "nova")]

    def test_clip_durations_cover_the_speech_estimate(self, dirs, make_asset, capabilities, media_tool):
        assets = [make_asset("kitchen"), make_asset("bedroom"), make_asset("exterior")]
        result = asyncio.run(run_pipeline(_request(assets), capabilities))

        expected = estimate_speech_duration(sanitize(SCRIPT))
        assert result.duration_sec == expected
        assert sum(_clip_durations(media_tool)) == pytest.approx(expected, abs=0.01)

    def test_aspect_ratio_sets_clip_resolution(self, dirs, make_asset, capabilities, media_tool):
        asyncio.run(run_pipeline(_request([make_asset("kitchen")], aspect_ratio="9:16"), capabilities))
        clip = media_tool.calls_with("-loop")[0]
        assert "scale=1080:1920" in clip[clip.index("-vf") + 1]

    def test_stage_order(self, dirs, make_asset, capabilities, media_tool):
        asyncio.run(run_pipeline(_request([make_asset("kitchen")]), capabilities))
        flags = ["-loop", "concat", "-map"]
        first_seen = [next(i for i, c in enumerate(media_tool.calls) if f in c) for f in flags]
        assert first_seen == sorted(first_seen)


class TestAudio:
    def test_no_music_is_voiceover_only(self, dirs, make_asset, capabilities, media_tool):
        asyncio.run(run_pipeline(_request([make_asset("kitchen")], music="none"), capabilities))
        assert media_tool.calls_with("-filter_complex") == []
        final = media_tool.calls[-1]
        assert final[final.index("-map") + 1] == "0:v"

    def test_music_bed_gain(self, dirs, make_asset, capabilities, media_tool):
        (dirs["music"] / "upbeat.mp3").write_bytes(b"music")
        asyncio.run(
            run_pipeline(_request([make_asset("kitchen")], music="upbeat", music_gain=50), capabilities)
        )
        (mix,) = media_tool.calls_with("-filter_complex")
        assert "volume=0.5," in mix[mix.index("-filter_complex") + 1]
        assert str(dirs["music"] / "upbeat.mp3") in mix

    def test_missing_music_file_falls_back_to_voiceover_only(self, dirs, make_asset, capabilities, media_tool):
        asyncio.run(run_pipeline(_request([make_asset("kitchen")], music="calm"), capabilities))
        assert media_tool.calls_with("-filter_complex") == []


class TestImageNormalization:
    def test_undecodable_image_goes_through_media_tool(self, dirs, make_asset, capabilities, media_tool):
        assets = [make_asset("kitchen"), make_asset("bedroom", valid=False)]
        asyncio.run(run_pipeline(_request(assets), capabilities))
        (convert,) = media_tool.calls_with("-frames:v")
        assert convert[convert.index("-i") + 1] == assets[1].path


class TestFailedRun:
    def test_clip_failure_names_stage_and_cleans_up(self, dirs, make_asset, synthesizer):
        media_tool = FakeMediaTool(fail_when=lambda args: "-loop" in args)
        capabilities = Capabilities(synthesizer=synthesizer, media_tool=media_tool)
        assets = [make_asset("kitchen"), make_asset("bedroom")]

        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(run_pipeline(_request(assets), capabilities))

        err = exc_info.value
        assert err.stage == "build_clips"
        assert isinstance(err.cause, MediaToolError)
        assert err.diagnostic == "boom: invalid input"
        assert "build_clips" in err.message
        assert list(dirs["output"].iterdir()) == []
        _assert_cleaned_up(dirs, assets)

    def test_mix_failure_leaves_no_partial_output(self, dirs, make_asset, synthesizer):
        media_tool = FakeMediaTool(fail_when=lambda args: "-map" in args)
        capabilities = Capabilities(synthesizer=synthesizer, media_tool=media_tool)

        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(run_pipeline(_request([make_asset("kitchen")]), capabilities))

        assert exc_info.value.stage == "mix_audio"
        assert list(dirs["output"].iterdir()) == []

    def test_direction_only_script_fails_before_synthesis(self, dirs, make_asset, capabilities, synthesizer, media_tool):
        assets = [make_asset("kitchen")]
        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(run_pipeline(_request(assets, script="[Scene 1]\n(music swells)"), capabilities))

        assert exc_info.value.stage == "voiceover"
        assert isinstance(exc_info.value.cause, SynthesisError)
        assert synthesizer.calls == []
        assert media_tool.calls == []
        _assert_cleaned_up(dirs, assets)


class TestWorkspaceSetup:
    def test_unusable_output_dir_removes_uploads(self, dirs, make_asset, capabilities, synthesizer, monkeypatch, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")
        monkeypatch.setattr(settings, "output_base_dir", str(blocker / "output"))
        assets = [make_asset("kitchen"), make_asset("bedroom")]

        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(run_pipeline(_request(assets), capabilities))

        assert exc_info.value.stage == "uploaded"
        assert exc_info.value.diagnostic
        assert synthesizer.calls == []
        _assert_cleaned_up(dirs, assets)

    def test_failed_subdirectory_removes_scratch_root(self, dirs, monkeypatch):
        real_mkdir = Path.mkdir

        def failing_mkdir(self, *args, **kwargs):
            if self.name == "clips":
                raise PermissionError("read-only scratch")
            return real_mkdir(self, *args, **kwargs)

        monkeypatch.setattr(Path, "mkdir", failing_mkdir)
        with pytest.raises(PermissionError):
            RunWorkspace.create()
        assert list(dirs["scratch"].iterdir()) == []


class TestCancellation:
    def test_cancel_event_stops_before_first_stage(self, dirs, make_asset, capabilities, synthesizer):
        assets = [make_asset("kitchen")]

        async def scenario():
            cancel = asyncio.Event()
            cancel.set()
            await run_pipeline(_request(assets), capabilities, cancel_event=cancel)

        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(scenario())

        assert isinstance(exc_info.value.cause, RunCancelledError)
        assert synthesizer.calls == []
        _assert_cleaned_up(dirs, assets)

    def test_task_cancellation_cleans_up(self, dirs, make_asset, media_tool):
        assets = [make_asset("kitchen")]

        class BlockingSynthesizer:
            def __init__(self):
                self.started = asyncio.Event()

            async def synthesize(self, text, voice):
                self.started.set()
                await asyncio.Event().wait()

        async def scenario():
            synthesizer = BlockingSynthesizer()
            capabilities = Capabilities(synthesizer=synthesizer, media_tool=media_tool)
            task = asyncio.create_task(run_pipeline(_request(assets), capabilities))
            await synthesizer.started.wait()
            task.cancel()
            await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(scenario())

        assert list(dirs["output"].iterdir()) == []
        _assert_cleaned_up(dirs, assets)

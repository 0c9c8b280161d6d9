"""Tests for the FFmpeg argument builders."""

import pytest

from adforge.tools.ffmpeg_commands import (
    concat_args,
    concat_manifest,
    format_gain,
    music_mix_args,
    music_mix_filter,
    still_clip_args,
    voiceover_only_args,
)


class TestFormatGain:
    @pytest.mark.parametrize("percent,expected", [(50, "0.5"), (15, "0.15"), (5, "0.05"), (100, "1")])
    def test_percent_to_factor(self, percent, expected):
        assert format_gain(percent) == expected


class TestStillClip:
    def test_duration_scale_and_pad(self):
        args = still_clip_args("/w/images/image-000.jpg", "/w/clips/clip-000.mp4", 4.5, 1080, 1920)
        assert args[:2] == ["-hide_banner", "-y"]
        assert args[args.index("-t") + 1] == "4.500"
        vf = args[args.index("-vf") + 1]
        assert "scale=1080:1920:force_original_aspect_ratio=decrease" in vf
        assert "pad=1080:1920:(ow-iw)/2:(oh-ih)/2" in vf
        assert args[args.index("-r") + 1] == "30"
        assert args[-1] == "/w/clips/clip-000.mp4"


class TestConcat:
    def test_manifest_lists_clips_in_order(self):
        manifest = concat_manifest(["/w/clips/clip-000.mp4", "/w/clips/clip-001.mp4"])
        assert manifest == "file '/w/clips/clip-000.mp4'\nfile '/w/clips/clip-001.mp4'\n"

    def test_manifest_escapes_single_quotes(self):
        manifest = concat_manifest(["/tmp/it's/clip.mp4"])
        assert manifest == "file '/tmp/it'\\''s/clip.mp4'\n"

    def test_concat_is_stream_copy(self):
        args = concat_args("/w/concat.txt", "/w/video-no-audio.mp4")
        assert ["-f", "concat", "-safe", "0"] == args[2:6]
        assert args[args.index("-c") + 1] == "copy"


class TestAudio:
    def test_mix_filter_gain_and_fade(self):
        graph = music_mix_filter(50, 30)
        assert graph.startswith("[1:a]volume=0.5,afade=t=out:st=27:d=3[music];")
        assert "[2:a]volume=1.0[voice]" in graph
        assert graph.endswith("amix=inputs=2:duration=shortest:dropout_transition=2[aout]")

    def test_fade_never_starts_before_zero(self):
        assert "st=0:" in music_mix_filter(15, 2)

    def test_music_loops_and_voice_is_third_input(self):
        args = music_mix_args("/v.mp4", "/m.mp3", "/vo.mp3", "/out.mp4", 15, 12)
        inputs = [args[i + 1] for i, a in enumerate(args) if a == "-i"]
        assert inputs == ["/v.mp4", "/m.mp3", "/vo.mp3"]
        assert args[args.index("-stream_loop") + 1] == "-1"
        assert args.index("-stream_loop") < args.index("/m.mp3")
        assert "-shortest" in args

    def test_voiceover_only_has_no_filter_graph(self):
        args = voiceover_only_args("/v.mp4", "/vo.mp3", "/out.mp4")
        assert "-filter_complex" not in args
        assert ["-map", "0:v", "-map", "1:a"] == args[args.index("-map"):args.index("-map") + 4]

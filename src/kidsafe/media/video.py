"""Video cutting, concatenation and final muxing using ffmpeg."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from kidsafe.core.errors import ContainerMismatch
from kidsafe.core.models import Segment
from kidsafe.media.ffmpeg import run_ffmpeg


def _codec_args(reencode: bool) -> list[str]:
    if reencode:
        return ["-c:v", "libx264", "-preset", "veryfast", "-crf", "18"]
    return ["-c:v", "copy"]


def trim_video(video_path: Path, segment: Segment, output_path: Path, reencode: bool = False) -> Path:
    """Copy one segment of the video stream (audio dropped) into ``output_path``.

    Stream copy snaps to keyframes; ``reencode`` gives frame-accurate edges.
    """
    run_ffmpeg(
        [
            "-ss",
            f"{segment.start:.6f}",
            "-i",
            str(video_path),
            "-t",
            f"{segment.duration:.6f}",
            "-map",
            "0:v:0",
            "-an",
            *_codec_args(reencode),
            str(output_path),
        ],
        f"trim video {segment.start:.2f}s-{segment.end:.2f}s",
    )
    return output_path


def concat_manifest_line(path: Path) -> str:
    """One concat-demuxer line; single quotes are escaped as ``'\\''``."""
    escaped = str(Path(path).resolve()).replace("'", "'\\''")
    return f"file '{escaped}'"


def write_concat_manifest(files: Sequence[Path], manifest_path: Path) -> Path:
    manifest_path = Path(manifest_path)
    manifest_path.write_text(
        "\n".join(concat_manifest_line(f) for f in files) + "\n", encoding="utf-8"
    )
    return manifest_path


def cut_video(
    video_path: Path,
    segments: Sequence[Segment],
    output_path: Path,
    scratch: Path,
    reencode: bool = False,
) -> Path:
    """Keep only ``segments`` of the video stream.

    A single segment is one trim. Several segments are trimmed to separate
    files in ``scratch`` and joined with the concat demuxer.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if len(segments) == 1:
        return trim_video(video_path, segments[0], output_path, reencode)

    suffix = Path(video_path).suffix
    parts = []
    for i, segment in enumerate(segments):
        part = Path(scratch) / f"segment_{i:04d}{suffix}"
        trim_video(video_path, segment, part, reencode)
        parts.append(part)

    manifest = write_concat_manifest(parts, Path(scratch) / "concat.txt")
    run_ffmpeg(
        ["-f", "concat", "-safe", "0", "-i", str(manifest), "-c", "copy", str(output_path)],
        "concat video",
    )
    return output_path


def mux(
    video_path: Path,
    audio_path: Path,
    output_path: Path,
    audio_codec: str = "aac",
    audio_bitrate: str | None = "192k",
    copy_subtitles: bool = True,
) -> Path:
    """Combine the video stream with sanitized audio into the final file.

    The video stream is copied untouched. Subtitle streams of the video
    input are copied when ``copy_subtitles`` is set and any exist.

    Raises:
        ContainerMismatch: If the output extension differs from the video's.
    """
    video_path, output_path = Path(video_path), Path(output_path)
    input_ext = video_path.suffix.lower()
    output_ext = output_path.suffix.lower()
    if input_ext != output_ext:
        raise ContainerMismatch(input_ext, output_ext)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    args = ["-i", str(video_path), "-i", str(audio_path), "-map", "0:v:0", "-map", "1:a:0"]
    if copy_subtitles:
        args.extend(["-map", "0:s?", "-c:s", "copy"])
    args.extend(["-c:v", "copy", "-c:a", audio_codec])
    if audio_bitrate:
        args.extend(["-b:a", audio_bitrate])
    args.append(str(output_path))

    run_ffmpeg(args, "mux")
    return output_path

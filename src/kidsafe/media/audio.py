"""Audio extraction, silencing and cutting using ffmpeg."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Sequence

from kidsafe.core.models import Segment
from kidsafe.editing.envelope import SilenceEnvelope
from kidsafe.media.ffmpeg import run_ffmpeg


def _ts(seconds: float) -> str:
    return f"{seconds:.6f}"


def extract_audio(
    video_path: Path,
    output_path: Path,
    sample_rate: int | None = None,
    channels: int | None = None,
) -> Path:
    """Extract the first audio stream of a video to 16-bit PCM WAV.

    Args:
        video_path: Path to the input video file.
        output_path: Path for the output WAV file.
        sample_rate: Resample to this rate. None keeps the source rate.
        channels: Downmix to this many channels. None keeps the source layout.

    Returns:
        Path to the extracted audio file.

    Raises:
        ExternalEngineFailure: If ffmpeg fails.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    args = [
        "-i",
        str(video_path),
        "-map",
        "0:a:0",
        "-vn",  # no video
        "-acodec",
        "pcm_s16le",  # 16-bit PCM
    ]
    if sample_rate is not None:
        args.extend(["-ar", str(sample_rate)])
    if channels is not None:
        args.extend(["-ac", str(channels)])
    args.extend(["-map_metadata", "-1", str(output_path)])

    run_ffmpeg(args, "extract audio")
    return output_path


def volume_expression(ranges: Sequence[tuple[float, float]]) -> str:
    """Render muted ranges as an ffmpeg ``volume`` expression.

    Each range contributes ``gte(t,start)*lt(t,end)``, which is 1 inside
    ``[start, end)``. Ranges are disjoint so at most one term is 1 at any
    time and ``1 - sum`` is exactly the 0/1 gate. A flat sum avoids the
    deep nesting a chain of ``if()`` calls would need.
    """
    if not ranges:
        return "1"
    terms = "+".join(f"gte(t,{_ts(start)})*lt(t,{_ts(end)})" for start, end in ranges)
    return f"1-({terms})"


def silence_audio(audio_path: Path, envelope: SilenceEnvelope, output_path: Path) -> Path:
    """Apply the silence envelope without changing the audio's duration.

    A pass-through envelope copies the file and skips ffmpeg entirely.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if envelope.is_passthrough:
        shutil.copyfile(audio_path, output_path)
        return output_path

    expr = volume_expression(envelope.ranges)
    run_ffmpeg(
        [
            "-i",
            str(audio_path),
            "-af",
            f"volume='{expr}':eval=frame",
            "-acodec",
            "pcm_s16le",
            str(output_path),
        ],
        "silence audio",
    )
    return output_path


def trim_filtergraph(segments: Sequence[Segment]) -> str:
    """Build an ``atrim``/``concat`` graph keeping ``segments`` of input 0."""
    chains = []
    labels = []
    for i, seg in enumerate(segments):
        chains.append(
            f"[0:a]atrim=start={_ts(seg.start)}:end={_ts(seg.end)},asetpts=PTS-STARTPTS[a{i}]"
        )
        labels.append(f"[a{i}]")
    chains.append(f"{''.join(labels)}concat=n={len(segments)}:v=0:a=1[out]")
    return ";".join(chains)


def cut_audio(audio_path: Path, segments: Sequence[Segment], output_path: Path) -> Path:
    """Keep only ``segments`` of a WAV file, sample-accurately."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    run_ffmpeg(
        [
            "-i",
            str(audio_path),
            "-filter_complex",
            trim_filtergraph(segments),
            "-map",
            "[out]",
            "-acodec",
            "pcm_s16le",
            str(output_path),
        ],
        "cut audio",
    )
    return output_path

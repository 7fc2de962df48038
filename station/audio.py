"""
Audio transcoding for incoming voice notes.

Wraps ffmpeg (via ffmpeg-python) to normalise arbitrary uploads into a fixed
bitrate MP3, and reads the result back with mutagen.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import ffmpeg
from mutagen import File as MutagenFile
from mutagen import MutagenError

from shared.constants import DEFAULT_MP3_BITRATE
from shared.errors import EncodeError

logger = logging.getLogger(__name__)


@dataclass
class EncodedAudio:
    path: Path
    duration_sec: int
    bitrate_kbps: int
    size_bytes: int


class Mp3Encoder:
    """Handler for the upload -> MP3 conversion."""

    def __init__(self, bitrate: int = DEFAULT_MP3_BITRATE):
        self.bitrate = bitrate

    def encode(self, input_path: str, output_path: str) -> EncodedAudio:
        """
        Convert an audio file to MP3.

        Args:
            input_path: Uploaded source file (any format ffmpeg can read)
            output_path: Destination MP3 file, overwritten if present

        Returns:
            Details of the written file

        Raises:
            EncodeError: if ffmpeg fails
        """
        try:
            stream = ffmpeg.input(str(input_path))
            stream = ffmpeg.output(
                stream,
                str(output_path),
                format='mp3',
                acodec='libmp3lame',
                audio_bitrate=f'{self.bitrate}k',
            )
            ffmpeg.run(stream, overwrite_output=True, quiet=True)
        except ffmpeg.Error as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            logger.warning("FFmpeg conversion error for %s: %s", input_path, stderr[-500:])
            raise EncodeError("File conversion failed.") from e

        duration, bitrate, size = self.get_audio_details(str(output_path))
        return EncodedAudio(Path(output_path), duration, bitrate, size)

    @staticmethod
    def get_audio_details(file_path: str) -> Tuple[int, int, int]:
        """
        Get duration, bitrate, and size of audio file.
        Returns: (duration_sec, bitrate_kbps, size_bytes)
        """
        size = os.path.getsize(file_path)
        duration = 0
        bitrate = 0

        try:
            audio = MutagenFile(file_path)
            if audio is not None:
                duration = int(audio.info.length)
                if getattr(audio.info, 'bitrate', None):
                    bitrate = int(audio.info.bitrate / 1000)
        except MutagenError as e:
            logger.warning("Could not read audio details from %s: %s", file_path, e)

        return duration, bitrate, size

"""
Public upload intake: store the incoming blob, transcode it to MP3 under a
collision-free name and record a new submission.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from flask import Blueprint, jsonify, request
from werkzeug.datastructures import FileStorage

from shared.constants import TEMP_UPLOAD_PREFIX
from shared.errors import ValidationError
from shared.models import Submission
from station.filenames import build_base_filename, reserve_output_path

logger = logging.getLogger(__name__)


class IntakeService:
    def __init__(self, ctx):
        self.ctx = ctx

    @property
    def upload_dir(self) -> Path:
        return self.ctx.settings.upload_dir

    def accept(self, audio: FileStorage, first_name: Optional[str],
               postcode: Optional[str]) -> Submission:
        """
        Encode an uploaded file and record it.

        Raises:
            EncodeError: transcoding failed; nothing is left on disk or in the store
            PersistenceError: the row could not be written; the MP3 is removed again
        """
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=TEMP_UPLOAD_PREFIX, suffix=".upload",
                                         dir=self.upload_dir)
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            audio.save(temp_name)
            output_path = reserve_output_path(self.upload_dir, build_base_filename(first_name, postcode))
            try:
                encoded = self.ctx.encoder.encode(str(temp_path), str(output_path))
            except Exception:
                output_path.unlink(missing_ok=True)
                raise
        finally:
            temp_path.unlink(missing_ok=True)

        try:
            submission = self.ctx.db.insert_submission(output_path.name)
        except Exception:
            output_path.unlink(missing_ok=True)
            raise

        logger.info("New submission saved to DB: %s (%ss, %s kbps, %s bytes)",
                    submission.filename, encoded.duration_sec, encoded.bitrate_kbps,
                    encoded.size_bytes)
        self.ctx.broadcaster.publish()
        return submission


def create_intake_blueprint(ctx) -> Blueprint:
    bp = Blueprint('intake', __name__)
    service = IntakeService(ctx)

    @bp.route('/upload', methods=['POST'])
    def upload():
        audio = request.files.get('audio')
        if audio is None or not audio.filename:
            logger.warning("Upload rejected: no audio part in request")
            raise ValidationError("Upload failed.")

        submission = service.accept(
            audio,
            first_name=request.form.get('firstName'),
            postcode=request.form.get('postcode'),
        )
        return jsonify({"message": "Upload successful!", "filename": submission.filename}), 200

    return bp

"""
Staff review API: list, change status, assign, delete and export submissions.
Every route requires a logged-in session and every mutation is broadcast.
"""
import json
import logging

from flask import Blueprint, Response, g, jsonify, request, send_from_directory

from shared.constants import ARCHIVE_FILENAME, MP3_MIME_TYPE
from shared.errors import PersistenceError, ValidationError
from shared.models import SubmissionStatus
from station.archive import stream_zip
from station.auth import request_data, require_login
from station.filenames import safe_basename

logger = logging.getLogger(__name__)


def _parse_filename_list(raw) -> list:
    """Accept a real list or a JSON-encoded one (form posts send the latter)."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []
    return [name for name in raw if isinstance(name, str) and name]


def create_review_blueprint(ctx) -> Blueprint:
    bp = Blueprint('review', __name__)
    login_required = require_login(ctx.sessions)
    upload_dir = ctx.settings.upload_dir

    def announce():
        ctx.broadcaster.publish()

    @bp.route('/api/submissions', methods=['GET'])
    @login_required
    def list_submissions():
        assignee = request.args.get('assignee')
        if assignee == 'all':
            assignee = None
        submissions = ctx.db.list_submissions(assignee=assignee)
        return jsonify([s.to_dict() for s in submissions])

    @bp.route('/api/submission/status', methods=['POST'])
    @login_required
    def update_status():
        data = request_data()
        filename = data.get('filename')
        status = SubmissionStatus.parse(data.get('status'))
        if not filename or status is None:
            raise ValidationError("Filename and a valid status are required.")

        approved_by = g.user.user_email if status is SubmissionStatus.APPROVED else None
        ctx.db.update_status(filename, status, approved_by)
        logger.info("[Action] Status for %s updated to %s by user: %s",
                    filename, status.value, g.user.user_email)
        announce()
        return jsonify({"message": "Status updated successfully."}), 200

    @bp.route('/api/submission/delete', methods=['POST'])
    @login_required
    def delete_submission():
        filename = safe_basename(request_data().get('filename'))
        target = upload_dir / filename
        if not filename or target.is_dir():
            raise ValidationError("Filename is required.")

        target.unlink(missing_ok=True)
        removed = ctx.db.delete_submission(filename)
        logger.info("[Action] Permanently deleted %s by user: %s%s", filename,
                    g.user.user_email, "" if removed else " (no record)")
        announce()
        return jsonify({"message": "Submission permanently deleted."}), 200

    @bp.route('/api/submissions/assign-bulk', methods=['POST'])
    @login_required
    def assign_bulk():
        data = request_data()
        filenames = data.get('filenames')
        assignee = data.get('assigneeEmail')
        if not isinstance(filenames, list) or not filenames or not assignee:
            raise ValidationError("Filenames and assignee are required.")

        ctx.db.assign(filenames, assignee)
        logger.info("[Action] %d files assigned to %s by %s",
                    len(filenames), assignee, g.user.user_email)
        announce()
        return jsonify({"message": "Submissions assigned successfully."}), 200

    @bp.route('/api/download-approved', methods=['POST'])
    @login_required
    def download_approved():
        raw = request.form.get('filenames')
        if raw is None:
            raw = (request.get_json(silent=True) or {}).get('filenames')
        filenames = [safe_basename(name) for name in _parse_filename_list(raw)]
        filenames = [name for name in filenames if name]
        if not filenames:
            raise ValidationError("No filenames provided.")

        user_email = g.user.user_email

        def mark_downloaded():
            try:
                ctx.db.mark_downloaded(filenames)
            except PersistenceError:
                logger.error("Bulk download status update failed for %d files", len(filenames))
                return
            announce()
            logger.info("[Action] %d files marked as Downloaded by user: %s",
                        len(filenames), user_email)

        entries = [(upload_dir / name, name) for name in filenames]
        response = Response(stream_zip(entries, on_complete=mark_downloaded),
                            mimetype='application/zip')
        response.headers['Content-Disposition'] = f'attachment; filename="{ARCHIVE_FILENAME}"'
        return response

    @bp.route('/uploads/<path:filename>', methods=['GET'])
    @login_required
    def serve_upload(filename):
        return send_from_directory(upload_dir, filename, mimetype=MP3_MIME_TYPE)

    return bp

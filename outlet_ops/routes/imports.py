"""
Bulk import routes — upload → preview (stored in Redis) → commit or discard.
"""
import logging

from flask import Blueprint, Response, current_app, jsonify, request

from outlet_ops.config import IMPORT_TEMPLATE_ROWS
from outlet_ops.services.outlets import OutletService
from outlet_ops.services.preview_store import (
    PreviewNotFound, save_preview, load_preview, discard_preview,
)
from outlet_ops.services.rowsource import ImportFileError, read_rows, template_workbook

logger = logging.getLogger('routes.imports')

bp = Blueprint('imports', __name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def _service() -> OutletService:
    return OutletService(current_app.config['OUTLET_REPOSITORY'])


@bp.route('/api/imports/preview', methods=['POST'])
def preview_import():
    """
    Parse and reconcile an uploaded spreadsheet without changing anything.

    Returns a token plus New/Update/failure counts and the failure report.
    A file that cannot be parsed is a single 400 error; no preview is stored.
    """
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return jsonify({'error': 'No file uploaded'}), 400

    try:
        rows = read_rows(upload.read(), upload.filename)
    except ImportFileError as e:
        return jsonify({'error': str(e)}), 400

    summary = _service().preview_import(rows)
    token = save_preview(summary)
    logger.info("Import preview %s from %s: %s", token, upload.filename, summary.counts(),
                extra={'import_token': token})
    return jsonify({'token': token, **summary.to_dict()})


@bp.route('/api/imports/<token>/commit', methods=['POST'])
def commit_import(token):
    """Apply a stored preview in one save; the preview is consumed."""
    summary = load_preview(token)
    if not summary.success:
        discard_preview(token)
        return jsonify({'committed': 0, 'counts': summary.counts()})

    _service().commit_import(summary)
    discard_preview(token)
    logger.info("Import %s committed: %s", token, summary.counts(), extra={'import_token': token})
    return jsonify({'committed': len(summary.success), 'counts': summary.counts()})


@bp.route('/api/imports/<token>', methods=['DELETE'])
def discard_import(token):
    if not discard_preview(token):
        raise PreviewNotFound(token)
    return jsonify({'discarded': token})


@bp.route('/api/imports/template')
def download_template():
    """XLSX template with the expected column headers."""
    return Response(
        template_workbook(IMPORT_TEMPLATE_ROWS),
        mimetype=XLSX_MIMETYPE,
        headers={'Content-Disposition': 'attachment; filename=Outlet_Import_Template.xlsx'},
    )

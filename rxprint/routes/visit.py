"""
Visit Prescription Routes
Download and print the prescription document of a visit
"""
from io import BytesIO
import logging

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from rxprint.rendering import PRINT_MODES, DocumentGenerationError
from rxprint.services.document_service import (
    capture_prescription_pdf,
    generate_prescription_pdf,
    load_visit_record,
    print_prescription,
)

logger = logging.getLogger(__name__)

visit_bp = Blueprint('visit', __name__, url_prefix='/api/visits')


def _visit_not_found(visit_id):
    return jsonify({
        'success': False,
        'error': f'Visit with ID {visit_id} not found'
    }), 404


def _send_document(document):
    inline = request.args.get('inline', request.args.get('preview')) in ('1', 'true', 'yes')
    response = send_file(
        BytesIO(document.content),
        mimetype=document.mimetype,
        as_attachment=not inline,
        download_name=document.filename,
    )
    response.headers['Cache-Control'] = 'no-store'
    return response


@visit_bp.route('/<int:visit_id>/prescription.pdf', methods=['GET'])
def download_prescription_pdf(visit_id):
    """
    Two-page prescription PDF: PATIENT copy then OFFICE copy.
    Query param: inline=1 or preview=1 to open in the browser.
    """
    try:
        record = load_visit_record(visit_id)
        if record is None:
            return _visit_not_found(visit_id)
        return _send_document(generate_prescription_pdf(record))

    except DocumentGenerationError as e:
        return jsonify({'success': False, 'error': e.message}), 500
    except Exception as e:
        logger.error(f"Error downloading prescription PDF for visit {visit_id}: {e}", exc_info=True)
        error_msg = 'Failed to generate PDF. Please try again.' if not current_app.debug else str(e)
        return jsonify({'success': False, 'error': error_msg}), 500


@visit_bp.route('/<int:visit_id>/prescription/capture.pdf', methods=['GET'])
def download_prescription_capture(visit_id):
    """Single-page PDF captured from the on-screen prescription view"""
    try:
        record = load_visit_record(visit_id)
        if record is None:
            return _visit_not_found(visit_id)
        return _send_document(capture_prescription_pdf(record))

    except DocumentGenerationError as e:
        return jsonify({'success': False, 'error': e.message}), 500
    except Exception as e:
        logger.error(f"Error capturing prescription for visit {visit_id}: {e}", exc_info=True)
        error_msg = 'Failed to generate PDF. Please try again.' if not current_app.debug else str(e)
        return jsonify({'success': False, 'error': error_msg}), 500


@visit_bp.route('/<int:visit_id>/prescription/print', methods=['GET'])
def print_visit_prescription(visit_id):
    """
    HTML page that opens the print dialog for the prescription.

    Query params:
        mode: letterhead (hide header, separator and watermark) or plain (default)
    """
    mode = request.args.get('mode', 'plain').lower()
    if mode not in PRINT_MODES:
        return jsonify({
            'success': False,
            'error': f"Invalid print mode '{mode}'. Use one of: {', '.join(PRINT_MODES)}"
        }), 400

    try:
        record = load_visit_record(visit_id)
        if record is None:
            return _visit_not_found(visit_id)

        surface = print_prescription(record, mode)
        if surface is None:
            return jsonify({
                'success': False,
                'error': 'Print is unavailable right now. Please try again.'
            }), 503

        response = Response(surface.document, status=200, mimetype='text/html')
        response.headers['Cache-Control'] = 'no-store'
        return response

    except Exception as e:
        logger.error(f"Error printing prescription for visit {visit_id}: {e}", exc_info=True)
        error_msg = 'Failed to print prescription' if not current_app.debug else str(e)
        return jsonify({'success': False, 'error': error_msg}), 500

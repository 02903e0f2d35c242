"""
Health check endpoints for monitoring and load balancers
"""
import os
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from rxprint.extensions import db

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """Basic health check - no database connection"""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': 'rxprint'
    }), 200


def _rendering_status():
    """Which optional rendering inputs are configured; none of them gate readiness."""
    font_path = current_app.config.get('PDF_FONT_PATH')
    return {
        'unicode_font': bool(font_path and os.path.exists(font_path)),
        'header_image': bool(current_app.config.get('HEADER_IMAGE_URL')),
        'watermark_image': bool(current_app.config.get('WATERMARK_IMAGE_URL')),
        'separator_image': bool(current_app.config.get('SEPARATOR_IMAGE_URL')),
    }


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """Readiness check - includes database connection"""
    try:
        db.session.execute(db.text('SELECT 1'))
        db_status = 'connected'
    except SQLAlchemyError as e:
        db_status = f'error: {str(e)}'

    return jsonify({
        'status': 'ready' if db_status == 'connected' else 'not_ready',
        'database': db_status,
        'rendering': _rendering_status(),
        'timestamp': datetime.utcnow().isoformat()
    }), 200 if db_status == 'connected' else 503


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    """Liveness check for Kubernetes/containers"""
    return jsonify({
        'status': 'alive',
        'timestamp': datetime.utcnow().isoformat()
    }), 200

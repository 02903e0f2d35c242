"""
Request logging and response headers
"""
from flask import request, g
import logging
import time

logger = logging.getLogger(__name__)


def setup_middleware(app):
    """Attach request logging and security headers to the app"""

    @app.before_request
    def before_request():
        g.request_started = time.monotonic()

    @app.after_request
    def after_request(response):
        started = g.pop('request_started', None)
        elapsed_ms = (time.monotonic() - started) * 1000 if started is not None else 0
        logger.info(f"{request.method} {request.path} {response.status_code} "
                    f"{elapsed_ms:.0f}ms - {request.remote_addr}")

        if not app.debug:
            # Prevent MIME type sniffing
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            # Prevent clickjacking
            response.headers['X-Frame-Options'] = 'DENY'
            if request.is_secure:
                response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

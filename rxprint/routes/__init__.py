from .health import health_bp
from .visit import visit_bp

__all__ = ['health_bp', 'visit_bp']

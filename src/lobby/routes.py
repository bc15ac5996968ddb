"""
HTTP routes.

The lobby itself is driven over Socket.IO; HTTP only answers a
liveness probe at the API root.
"""

from flask import Blueprint, jsonify

bp = Blueprint('main', __name__, url_prefix='/api')


@bp.route('/')
def index():
    """API root, used as a health check."""
    return jsonify({'message': 'Hello World!'})

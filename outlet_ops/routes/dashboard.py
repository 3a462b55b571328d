"""
Dashboard routes — health check, pipeline stats, vocabularies.
"""
import logging
from flask import Blueprint, current_app, jsonify

from outlet_ops.pipeline.vocabulary import vocabulary_info
from outlet_ops.services.outlets import OutletService

logger = logging.getLogger('routes.dashboard')

bp = Blueprint('dashboard', __name__)


@bp.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy"}), 200


@bp.route('/api/stats')
def get_stats():
    """Board KPIs and per-stage load for active outlets."""
    service = OutletService(current_app.config['OUTLET_REPOSITORY'])
    return jsonify(service.stats())


@bp.route('/api/vocabulary')
def get_vocabulary():
    """Stages, brands, cities and statuses the UI should offer."""
    return jsonify(vocabulary_info())

"""
Outlet routes — board listing, stage moves, notes, lifecycle, descriptions.
"""
import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from outlet_ops.services.openai_client import generate_outlet_description
from outlet_ops.services.outlets import OutletService

logger = logging.getLogger('routes.outlets')

bp = Blueprint('outlets', __name__)

EDITABLE_FIELDS = ('name', 'description', 'brand', 'city', 'status', 'priority')


def _service() -> OutletService:
    return OutletService(current_app.config['OUTLET_REPOSITORY'])


def _parse_timestamp(value) -> datetime:
    if not value:
        raise ValueError('timestamp is required')
    dt = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@bp.errorhandler(ValueError)
def _bad_request(e):
    return jsonify({'error': str(e)}), 400


@bp.route('/api/outlets')
def list_outlets():
    """Active outlets, optionally filtered by ?q= (name, description, notes...)."""
    outlets = _service().list_active(request.args.get('q'))
    return jsonify([o.to_dict() for o in outlets])


@bp.route('/api/outlets/archived')
def list_archived():
    """Recycle bin."""
    return jsonify([o.to_dict() for o in _service().list_archived()])


@bp.route('/api/outlets', methods=['POST'])
def create_outlet():
    data = request.json or {}
    outlet = _service().add(
        name=data.get('name', ''),
        description=data.get('description', ''),
        note=data.get('note', ''),
        status=data.get('status'),
        priority=data.get('priority'),
        brand=data.get('brand'),
        city=data.get('city'),
    )
    return jsonify(outlet.to_dict()), 201


@bp.route('/api/outlets/describe', methods=['POST'])
def describe_outlet():
    """Suggest a one-line description for a new outlet name."""
    data = request.json or {}
    name = data.get('name')
    name = name.strip() if isinstance(name, str) else ''
    if not name:
        return jsonify({'error': 'Name is required'}), 400
    return jsonify({'description': generate_outlet_description(name)})


@bp.route('/api/outlets/<outlet_id>')
def get_outlet(outlet_id):
    return jsonify(_service().get(outlet_id).to_dict())


@bp.route('/api/outlets/<outlet_id>', methods=['PATCH'])
def update_outlet(outlet_id):
    """Edit descriptive fields; stage changes go through /stage."""
    data = request.json or {}
    changes = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    outlet = _service().update_fields(outlet_id, **changes)
    return jsonify(outlet.to_dict())


@bp.route('/api/outlets/<outlet_id>/move', methods=['POST'])
def move_outlet(outlet_id):
    data = request.json or {}
    outlet, moved = _service().move(outlet_id, data.get('direction', ''))
    return jsonify({'moved': moved, 'outlet': outlet.to_dict()})


@bp.route('/api/outlets/<outlet_id>/stage', methods=['PUT'])
def set_outlet_stage(outlet_id):
    data = request.json or {}
    outlet, moved = _service().set_stage(outlet_id, data.get('stage'))
    return jsonify({'moved': moved, 'outlet': outlet.to_dict()})


@bp.route('/api/outlets/<outlet_id>/notes', methods=['PUT'])
def update_note(outlet_id):
    data = request.json or {}
    outlet = _service().update_note(outlet_id, data.get('note', ''), stage=data.get('stage'))
    return jsonify(outlet.to_dict())


@bp.route('/api/outlets/<outlet_id>/timestamps', methods=['PUT'])
def update_timestamp(outlet_id):
    data = request.json or {}
    if not data.get('stage'):
        return jsonify({'error': 'stage is required'}), 400
    outlet = _service().update_timestamp(
        outlet_id, data['stage'], _parse_timestamp(data.get('timestamp')),
    )
    return jsonify(outlet.to_dict())


@bp.route('/api/outlets/<outlet_id>/archive', methods=['POST'])
def archive_outlet(outlet_id):
    return jsonify(_service().archive(outlet_id).to_dict())


@bp.route('/api/outlets/<outlet_id>/restore', methods=['POST'])
def restore_outlet(outlet_id):
    return jsonify(_service().restore(outlet_id).to_dict())


@bp.route('/api/outlets/<outlet_id>', methods=['DELETE'])
def delete_outlet(outlet_id):
    """Permanent delete. Confirmation is the caller's job."""
    _service().permanently_delete(outlet_id)
    return jsonify({'deleted': outlet_id})

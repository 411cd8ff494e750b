"""
API Blueprint - JSON endpoints for the portfolio site and its admin panel
Handles: portfolio document, skills/projects/services CRUD, personal info, PIN auth, backups
"""
import os

from flask import Blueprint, current_app, jsonify, request

import auth
import backups
from errors import ValidationError
from resources import coerce_bool

api_bp = Blueprint('api', __name__, url_prefix='/api')

COLLECTIONS = (
    ('skills', 'Skill'),
    ('projects', 'Project'),
    ('services', 'Service'),
)


def get_portfolio():
    return current_app.extensions['portfolio']


def get_store():
    return current_app.extensions['portfolio_store']


def request_data():
    """JSON body, or form fields from a plain HTML form submission"""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError('Request body is not valid JSON')
        return data
    if request.form:
        return request.form.to_dict()
    raise ValidationError('Request body is required')


# Portfolio document
@api_bp.route('/portfolio', methods=['GET'])
def get_portfolio_document():
    """Full portfolio document, freshly loaded"""
    return jsonify(get_portfolio().document())


@api_bp.route('/portfolio', methods=['PUT'])
@auth.pin_required
def replace_portfolio_document():
    get_portfolio().replace(request_data())
    return jsonify({'success': True, 'message': 'Portfolio data updated successfully'})


@api_bp.route('/stats', methods=['GET'])
def portfolio_stats():
    """Collection counts and storage diagnostics"""
    return jsonify(get_portfolio().stats())


# Skills, projects and services share one set of CRUD views
def _register_collection(key, label):
    def list_items():
        featured = request.args.get('featured')
        items = get_portfolio().collection(key).list(
            featured=coerce_bool(featured) if featured is not None else None,
            sort=request.args.get('sort'),
            limit=request.args.get('limit', type=int),
        )
        return jsonify(items)

    def get_item(item_id):
        return jsonify(get_portfolio().collection(key).get(item_id))

    def create_item():
        record = get_portfolio().collection(key).create(request_data())
        return jsonify(record), 201

    def update_item(item_id):
        return jsonify(get_portfolio().collection(key).update(item_id, request_data()))

    def delete_item(item_id):
        get_portfolio().collection(key).delete(item_id)
        return jsonify({'success': True, 'message': f'{label} deleted successfully'})

    api_bp.add_url_rule(f'/{key}', f'list_{key}', list_items, methods=['GET'])
    api_bp.add_url_rule(f'/{key}/<int:item_id>', f'get_{key}', get_item, methods=['GET'])
    api_bp.add_url_rule(f'/{key}', f'create_{key}', auth.pin_required(create_item), methods=['POST'])
    api_bp.add_url_rule(f'/{key}/<int:item_id>', f'update_{key}', auth.pin_required(update_item), methods=['PUT'])
    api_bp.add_url_rule(f'/{key}/<int:item_id>', f'delete_{key}', auth.pin_required(delete_item), methods=['DELETE'])


for _key, _label in COLLECTIONS:
    _register_collection(_key, _label)


@api_bp.route('/projects/<int:item_id>/toggle-featured', methods=['PATCH'])
@auth.pin_required
def toggle_project_featured(item_id):
    return jsonify(get_portfolio().projects.toggle_featured(item_id))


# Personal info
@api_bp.route('/personal-info', methods=['GET'])
@api_bp.route('/personal', methods=['GET'])
def get_personal_info():
    return jsonify(get_portfolio().personal_info.get())


@api_bp.route('/personal-info', methods=['PUT'])
@api_bp.route('/personal', methods=['PUT'])
@auth.pin_required
def update_personal_info():
    return jsonify(get_portfolio().personal_info.update(request_data()))


# Auth
def _submitted_pin():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form.to_dict()
    return data.get('pin')


@api_bp.route('/auth/login', methods=['POST'])
def auth_login():
    """Authenticate admin with PIN"""
    result = auth.login(_submitted_pin(), current_app.config.get('ADMIN_PIN'))
    return jsonify({'success': True, 'message': 'Authentication successful', 'data': result})


@api_bp.route('/auth/verify', methods=['POST'])
def auth_verify():
    """Verify if a PIN is valid (without logging in)"""
    result = auth.verify(_submitted_pin(), current_app.config.get('ADMIN_PIN'))
    return jsonify({'success': True, 'data': result})


@api_bp.route('/auth/status', methods=['GET'])
def auth_status():
    return jsonify({
        'success': True,
        'message': 'Authentication service is running',
        'data': auth.status(),
    })


@api_bp.route('/health', methods=['GET'])
def health():
    return jsonify({
        'status': 'OK',
        'timestamp': auth.utc_timestamp(),
        'storage': get_store().backend,
        'environment': os.environ.get('FLASK_ENV', 'development'),
    })


# Backups
@api_bp.route('/backups', methods=['GET'])
def list_backups():
    """API endpoint to get backups list"""
    return jsonify(backups.get_backups_list(current_app.config['BACKUP_DIR']))


@api_bp.route('/backups', methods=['POST'])
@auth.pin_required
def create_manual_backup():
    """Create a manual backup"""
    backup_info = backups.create_backup(
        get_store(),
        current_app.config['BACKUP_DIR'],
        manual=True,
        max_backups=current_app.config['MAX_BACKUPS'],
    )
    return jsonify(backup_info), 201


@api_bp.route('/backups/<filename>/restore', methods=['POST'])
@auth.pin_required
def restore_backup(filename):
    """Restore a backup"""
    restored = backups.restore_backup(get_store(), current_app.config['BACKUP_DIR'], filename,
                                      max_backups=current_app.config['MAX_BACKUPS'])
    return jsonify({'success': True, 'message': f'Portfolio restored from backup: {restored}'})


@api_bp.route('/backups/<filename>', methods=['DELETE'])
@auth.pin_required
def delete_backup(filename):
    """Delete a backup file"""
    deleted = backups.delete_backup(current_app.config['BACKUP_DIR'], filename)
    return jsonify({'success': True, 'message': f'Backup deleted: {deleted}'})

"""Timestamped JSON snapshots of the portfolio document.

Snapshots live in BACKUP_DIR next to a ``backups.json`` index; only the
newest MAX_BACKUPS are kept. Restoring first snapshots the current document
as ``recovery_*.json`` so a restore can itself be undone by hand.
"""
import atexit
import json
import logging
import os
import threading
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from werkzeug.utils import secure_filename

from errors import NotFoundError, PortfolioError, StorageError, ValidationError
from resources import validate_document
from store import dump_document

logger = logging.getLogger(__name__)

METADATA_FILE = 'backups.json'

# Guards read-modify-write of the index between the scheduler thread and requests
_metadata_lock = threading.RLock()


def _metadata_path(backup_dir):
    return os.path.join(backup_dir, METADATA_FILE)


def _write_json(path, payload):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def create_backup(store, backup_dir, manual=True, max_backups=20):
    """Create a backup of the current document in backup_dir"""
    doc = store.load()
    timestamp = datetime.now()
    backup_filename = f"backup_{timestamp.strftime('%Y%m%d_%H%M%S_%f')}.json"
    backup_path = os.path.join(backup_dir, backup_filename)

    try:
        os.makedirs(backup_dir, exist_ok=True)
        with open(backup_path, 'w', encoding='utf-8') as backup:
            backup.write(dump_document(doc))
        file_size = os.path.getsize(backup_path) / 1024
    except OSError as e:
        logger.error(f"Error creating backup: {str(e)}")
        raise StorageError('Failed to create backup', error=str(e)) from e

    backup_info = {
        'filename': backup_filename,
        'timestamp': timestamp.isoformat(timespec='microseconds'),
        'size_kb': round(file_size, 2),
        'type': 'manual' if manual else 'automatic'
    }

    with _metadata_lock:
        save_backup_metadata(backup_dir, backup_info)
        keep_recent_backups(backup_dir, max_backups=max_backups)
    logger.info(f"Backup created: {backup_filename}")
    return backup_info


def save_backup_metadata(backup_dir, backup_info):
    """Append backup metadata to the index file"""
    with _metadata_lock:
        backups_list = get_backups_list(backup_dir)
        backups_list.append(backup_info)
        try:
            _write_json(_metadata_path(backup_dir), backups_list)
        except OSError as e:
            logger.error(f"Error saving backup metadata: {str(e)}")
            raise StorageError('Failed to save backup metadata', error=str(e)) from e


def get_backups_list(backup_dir):
    """Get list of all backups with metadata, newest first"""
    metadata_file = _metadata_path(backup_dir)
    if not os.path.exists(metadata_file):
        return []
    try:
        with open(metadata_file, 'r', encoding='utf-8') as f:
            backups = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading backups list: {str(e)}")
        raise StorageError('Failed to read backups list', error=str(e)) from e
    return sorted(backups, key=lambda x: x['timestamp'], reverse=True)


def keep_recent_backups(backup_dir, max_backups=20):
    """Keep only the most recent backups, recovery snapshots included"""
    with _metadata_lock:
        backups = get_backups_list(backup_dir)
        if len(backups) <= max_backups:
            return

        for backup in backups[max_backups:]:
            backup_path = os.path.join(backup_dir, backup['filename'])
            if os.path.exists(backup_path):
                os.remove(backup_path)

        try:
            _write_json(_metadata_path(backup_dir), backups[:max_backups])
        except OSError as e:
            logger.error(f"Error cleaning old backups: {str(e)}")
            raise StorageError('Failed to update backups list', error=str(e)) from e


def _backup_path(backup_dir, filename):
    filename = secure_filename(filename)
    backup_path = os.path.join(backup_dir, filename)
    if not filename or filename == METADATA_FILE or not os.path.isfile(backup_path):
        raise NotFoundError('Backup file not found')
    return filename, backup_path


def _write_recovery_copy(backup_dir, doc, max_backups):
    timestamp = datetime.now()
    recovery_name = f"recovery_{timestamp.strftime('%Y%m%d_%H%M%S_%f')}.json"
    recovery_path = os.path.join(backup_dir, recovery_name)
    try:
        with open(recovery_path, 'w', encoding='utf-8') as f:
            f.write(dump_document(doc))
        file_size = os.path.getsize(recovery_path) / 1024
    except OSError as e:
        logger.error(f"Error writing recovery backup: {str(e)}")
        raise StorageError('Failed to write recovery backup', error=str(e)) from e

    with _metadata_lock:
        save_backup_metadata(backup_dir, {
            'filename': recovery_name,
            'timestamp': timestamp.isoformat(timespec='microseconds'),
            'size_kb': round(file_size, 2),
            'type': 'recovery'
        })
        keep_recent_backups(backup_dir, max_backups=max_backups)
    return recovery_name


def restore_backup(store, backup_dir, filename, max_backups=20):
    """Replace the stored document with the content of a backup"""
    filename, backup_path = _backup_path(backup_dir, filename)

    try:
        with open(backup_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading backup {filename}: {str(e)}")
        raise StorageError('Backup file is unreadable', error=str(e)) from e
    try:
        validate_document(data)
    except ValidationError as e:
        logger.error(f"Backup {filename} is not a valid portfolio document: {e.message}")
        raise StorageError('Backup file does not contain a valid portfolio document',
                           error=e.message) from e

    with store.locked():
        try:
            current = store.load()
        except StorageError:
            current = None
            logger.warning("Current portfolio document is unreadable, restoring without recovery copy")

        if current is not None:
            _write_recovery_copy(backup_dir, current, max_backups)

        store.commit(data)

    logger.info(f"Portfolio restored from backup: {filename}")
    return filename


def delete_backup(backup_dir, filename):
    """Delete a backup file and drop it from the index"""
    with _metadata_lock:
        filename, backup_path = _backup_path(backup_dir, filename)
        os.remove(backup_path)

        backups = get_backups_list(backup_dir)
        updated_backups = [b for b in backups if b['filename'] != filename]
        try:
            _write_json(_metadata_path(backup_dir), updated_backups)
        except OSError as e:
            logger.error(f"Error updating backups list: {str(e)}")
            raise StorageError('Failed to update backups list', error=str(e)) from e
    return filename


def scheduled_backup(app):
    """Scheduled backup job"""
    with app.app_context():
        try:
            create_backup(app.extensions['portfolio_store'], app.config['BACKUP_DIR'],
                          manual=False, max_backups=app.config['MAX_BACKUPS'])
            app.logger.info("Scheduled backup created successfully")
        except PortfolioError as e:
            app.logger.error(f"Scheduled backup failed: {e.message}")


def start_scheduler(app):
    """Start the hourly backup job in a background thread"""
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        scheduled_backup,
        'cron',
        args=[app],
        hour='*',
        minute=0,
        id='hourly_backup',
        name='Hourly backup',
        replace_existing=True
    )
    scheduler.start()
    atexit.register(lambda: scheduler.shutdown(wait=False))
    return scheduler

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""

    # Admin Settings - no fallback: the PIN must come from the environment
    ADMIN_PIN = os.environ.get('ADMIN_PIN')
    REQUIRE_PIN_FOR_WRITES = _env_flag('REQUIRE_PIN_FOR_WRITES')

    # Storage Settings
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'json')
    DATA_FILE = os.environ.get('DATA_FILE', os.path.join('data', 'portfolio.json'))
    ENFORCE_REQUIRED_FIELDS = _env_flag('ENFORCE_REQUIRED_FIELDS', default=True)

    # Database Settings (STORAGE_BACKEND=database)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///portfolio.db')
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Backup Settings
    BACKUP_DIR = os.environ.get('BACKUP_DIR', 'backups')
    MAX_BACKUPS = int(os.environ.get('MAX_BACKUPS', '20'))
    BACKUP_SCHEDULE_ENABLED = _env_flag('BACKUP_SCHEDULE_ENABLED')

    # JSON Settings
    JSON_AS_ASCII = False
    JSON_SORT_KEYS = False

    # Server Settings
    PORT = int(os.environ.get('PORT', '3000'))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    BACKUP_SCHEDULE_ENABLED = _env_flag('BACKUP_SCHEDULE_ENABLED', default=True)


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    ADMIN_PIN = None
    REQUIRE_PIN_FOR_WRITES = False
    STORAGE_BACKEND = 'json'
    ENFORCE_REQUIRED_FIELDS = True
    BACKUP_SCHEDULE_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])

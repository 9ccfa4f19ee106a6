"""
Application configuration settings.
"""
import os


def env_setting(name: str, default, cast=str):
    """Read a HOSTSTATS_-prefixed environment override, falling back to default."""
    value = os.environ.get(f'HOSTSTATS_{name}')
    if value is None or value == '':
        return default
    try:
        return cast(value)
    except ValueError:
        return default


def env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(f'HOSTSTATS_{name}')
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration."""
    # Server settings
    HOST = env_setting('HOST', '0.0.0.0')
    PORT = env_setting('PORT', 3009, int)

    # CORS settings - may be overridden by the JSON config file
    CORS_ORIGINS = env_setting('CORS_ORIGINS', '*')

    # File paths
    STATIC_FOLDER = env_setting('STATIC_FOLDER', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'public'))
    HOSTSTATS_CONFIG = env_setting('CONFIG', '')

    # Monitoring settings
    STATS_INTERVAL = env_setting('STATS_INTERVAL', 2.0, float)  # Seconds between snapshots
    COMMAND_TIMEOUT = env_setting('COMMAND_TIMEOUT', 5.0, float)  # Seconds per external command
    STATS_EVENT = 'system_stats'

    # Subscriber settings
    SUBSCRIBER_QUEUE_SIZE = env_setting('SUBSCRIBER_QUEUE_SIZE', 8, int)
    START_BROADCASTER = env_flag('START_BROADCASTER', True)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = True
    TESTING = True
    # Tests drive broadcast cycles explicitly
    START_BROADCASTER = False
    HOSTSTATS_CONFIG = ''
    COMMAND_TIMEOUT = 2.0
    SUBSCRIBER_QUEUE_SIZE = 4


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


# Map environment names to config classes
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': ProductionConfig
}

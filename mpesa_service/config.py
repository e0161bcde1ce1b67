import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    ENCRYPTION_KEY = os.getenv('ENCRYPTION_KEY', 'dev-encryption-key')

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'postgresql://localhost/mpesa_service_dev')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    # Daraja
    DARAJA_SANDBOX_BASE_URL = os.getenv('DARAJA_SANDBOX_BASE_URL', 'https://sandbox.safaricom.co.ke')
    DARAJA_PRODUCTION_BASE_URL = os.getenv('DARAJA_PRODUCTION_BASE_URL', 'https://api.safaricom.co.ke')
    DARAJA_CONNECT_TIMEOUT = float(os.getenv('DARAJA_CONNECT_TIMEOUT', '30'))
    DARAJA_READ_TIMEOUT = float(os.getenv('DARAJA_READ_TIMEOUT', '60'))
    DARAJA_TOKEN_CACHE_MINUTES = int(os.getenv('DARAJA_TOKEN_CACHE_MINUTES', '55'))
    DARAJA_TOKEN_CACHE_BACKEND = os.getenv('DARAJA_TOKEN_CACHE_BACKEND', 'memory')
    DARAJA_CERTIFICATE_PATH = os.getenv('DARAJA_CERTIFICATE_PATH')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    DARAJA_TOKEN_CACHE_BACKEND = os.getenv('DARAJA_TOKEN_CACHE_BACKEND', 'redis')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    ENCRYPTION_KEY = 'test-encryption-key'
    DARAJA_TOKEN_CACHE_BACKEND = 'memory'
    DARAJA_CERTIFICATE_PATH = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

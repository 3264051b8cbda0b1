import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the package directory or its parent
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get('JWT_ACCESS_TOKEN_HOURS', '24')))

    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017/expenses')
    # Used when MONGO_URI carries no database path
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'expenses')

    CORS_ORIGINS = _split_origins(
        os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000')
    )

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'

    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '5000'))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = SECRET_KEY
    MONGO_URI = 'mongodb://localhost:27017/expenses_test'
    MONGO_DB_NAME = 'expenses_test'
    LOG_LEVEL = 'WARNING'

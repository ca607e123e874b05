# config.py

import os
from dotenv import load_dotenv

# Get the base directory of the application
basedir = os.path.abspath(os.path.dirname(__file__))

# Load the .env file from the project root, if present.
load_dotenv(os.path.join(basedir, '..', '.env'))


def _split_origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    """
    Contains all the configuration variables for the application:
    database, token signing, upload limits and CORS.
    """
    # --- Database Settings ---
    # Falls back to a local SQLite file when DATABASE_URL is not set.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'crowdchain.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Secret Keys ---
    SECRET_KEY = os.environ.get('SECRET_KEY')
    # Signing secret for access tokens. Falls back to SECRET_KEY.
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    # Access tokens are deliberately short-lived.
    JWT_EXPIRES_IN_SECONDS = int(os.environ.get('JWT_EXPIRES_IN_SECONDS') or 60)

    # --- Server ---
    PORT = int(os.environ.get('PORT') or 3000)
    CORS_ORIGINS = _split_origins(os.environ.get('CORS_ORIGINS') or '*')

    # --- Verification Document Uploads ---
    MAX_VERIFICATION_DOCS = int(os.environ.get('MAX_VERIFICATION_DOCS') or 5)
    MAX_DOCUMENT_BYTES = int(os.environ.get('MAX_DOCUMENT_BYTES') or 10 * 1024 * 1024)
    # Whole-request ceiling: every document at its cap plus room for form fields.
    MAX_CONTENT_LENGTH = MAX_VERIFICATION_DOCS * MAX_DOCUMENT_BYTES + 1024 * 1024


class TestConfig(Config):
    """Isolated configuration used by the test suite."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'
    JWT_EXPIRES_IN_SECONDS = 60
    CORS_ORIGINS = ['*']

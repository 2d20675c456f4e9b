import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///loantracker.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Bearer tokens
    TOKEN_MAX_AGE = int(os.environ.get('TOKEN_MAX_AGE') or 12 * 60 * 60)  # 12 hours

    # Loan defaults, used once when the loan is first created
    LOAN_PRINCIPAL = os.environ.get('LOAN_PRINCIPAL') or '20000'
    LOAN_MONTHLY_PAYMENT = os.environ.get('LOAN_MONTHLY_PAYMENT') or '330'
    LOAN_TOTAL_MONTHS = int(os.environ.get('LOAN_TOTAL_MONTHS') or 60)

    # User roster, provisioned at startup
    USER_ROSTER = _csv(os.environ.get('USER_ROSTER') or 'Gilbert,Christian,Frank,Jasper,Guest')
    EDITOR_USERNAMES = _csv(os.environ.get('EDITOR_USERNAMES') or 'Jasper')
    ROSTER_PASSWORD = os.environ.get('ROSTER_PASSWORD') or 'BMW123'

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    PORT = int(os.environ.get('PORT') or 4000)

    # Client side
    API_URL = os.environ.get('API_URL') or 'http://localhost:4000'
    TOKEN_FILE = os.environ.get('TOKEN_FILE') or os.path.join(os.path.expanduser('~'), '.loantracker-token.json')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    SQLALCHEMY_ECHO = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'WARNING'

    # Database optimization for production
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
        'pool_size': 10,
        'max_overflow': 20
    }


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'testing-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    LOAN_PRINCIPAL = '20000'
    LOAN_MONTHLY_PAYMENT = '330'
    LOAN_TOTAL_MONTHS = 60
    USER_ROSTER = ['Gilbert', 'Christian', 'Frank', 'Jasper', 'Guest']
    EDITOR_USERNAMES = ['Jasper']
    ROSTER_PASSWORD = 'BMW123'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

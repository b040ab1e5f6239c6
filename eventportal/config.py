"""
Event Portal Configuration
"""
import logging
import os
import secrets

logger = logging.getLogger(__name__)

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Database configuration
DATABASE_PATH = os.environ.get(
    'EVENTPORTAL_DATABASE',
    os.path.join(os.path.dirname(BASE_DIR), 'data', 'eventportal.db')
)

# Where the host application's login view lives
LOGIN_URL = os.environ.get('EVENTPORTAL_LOGIN_URL', '/login')

# Roles and targeting dimensions
VALID_ROLES = ['student', 'faculty', 'staff', 'guest']
AFFILIATED_ROLES = ['student', 'faculty', 'staff']
EMPLOYEE_ROLES = ['faculty', 'staff']

VALID_UNITS = ['CA', 'CAS', 'CCHAMS', 'CCS', 'CE', 'CF', 'CGS', 'CM']
GUEST_UNIT = 'GUEST'

VALID_YEAR_LEVELS = [1, 2, 3, 4]
VALID_SECTIONS = ['Irregular', 'A', 'B', 'C', 'D', 'E', 'F', 'G']
VALID_SEX_OPTIONS = ['male', 'female']

# Email suffixes used to derive a role at account setup
STUDENT_EMAIL_SUFFIX = os.environ.get('STUDENT_EMAIL_SUFFIX', '@student.dmmmsu.edu.ph')
EMPLOYEE_EMAIL_SUFFIX = os.environ.get('EMPLOYEE_EMAIL_SUFFIX', '@dmmmsu.edu.ph')

# Event times are entered and mailed in this zone, stored as UTC
EVENT_TIMEZONE = os.environ.get('EVENT_TIMEZONE', 'Asia/Manila')

# Seconds between live countdown updates
COUNTDOWN_INTERVAL = 1.0

# Notification mail settings
SMTP_HOST = os.environ.get('SMTP_HOST', 'smtp.gmail.com')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '465'))
SMTP_USER = os.environ.get('GMAIL_USER')
SMTP_PASSWORD = os.environ.get('GMAIL_APP_PASSWORD')
NOTIFY_ON_SAVE = True

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# Flask secret key (MUST be set in production via environment variable)
SECRET_KEY = os.environ.get('FLASK_SECRET_KEY')
if not SECRET_KEY:
    # Development fallback - generates a random key per process
    SECRET_KEY = secrets.token_hex(32)
    logger.warning("Using auto-generated SECRET_KEY. Set FLASK_SECRET_KEY environment variable in production!")


def as_mapping():
    """Return the settings above as a dict suitable for app.config."""
    return {
        'SECRET_KEY': SECRET_KEY,
        'DATABASE_PATH': DATABASE_PATH,
        'LOGIN_URL': LOGIN_URL,
        'STUDENT_EMAIL_SUFFIX': STUDENT_EMAIL_SUFFIX,
        'EMPLOYEE_EMAIL_SUFFIX': EMPLOYEE_EMAIL_SUFFIX,
        'EVENT_TIMEZONE': EVENT_TIMEZONE,
        'COUNTDOWN_INTERVAL': COUNTDOWN_INTERVAL,
        'SMTP_HOST': SMTP_HOST,
        'SMTP_PORT': SMTP_PORT,
        'SMTP_USER': SMTP_USER,
        'SMTP_PASSWORD': SMTP_PASSWORD,
        'NOTIFY_ON_SAVE': NOTIFY_ON_SAVE,
        'LOG_LEVEL': LOG_LEVEL,
        # CSRF protection is installed but checked per view
        'WTF_CSRF_CHECK_DEFAULT': False,
    }

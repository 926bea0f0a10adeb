SECRET_KEY = "test-secret"

API_URL = "http://api.test"
API_TIMEOUT = 1

QR_TOKEN = "TEST_QR_TOKEN"

COMPANY_NAME = "Ocean Garage"
COMPANY_TAGLINE = "Fahrzeugreparatur & Service"
COMPANY_COUNTRY = "Schweiz"

HOURLY_RATE = 120.0
DEFAULT_TAX_RATE = 7.7

SESSION_DAYS = 7
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

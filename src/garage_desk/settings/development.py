import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# Backend REST API
API_URL = os.getenv("API_URL", "http://localhost:3001")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "15"))

# QR Code token for workshop check-in
QR_TOKEN = os.getenv("QR_TOKEN", "GARAGE_CHECKIN")

COMPANY_NAME = os.getenv("COMPANY_NAME", "Ocean Garage")
COMPANY_TAGLINE = os.getenv("COMPANY_TAGLINE", "Fahrzeugreparatur & Service")
COMPANY_COUNTRY = os.getenv("COMPANY_COUNTRY", "Schweiz")

HOURLY_RATE = float(os.getenv("HOURLY_RATE", "120"))
DEFAULT_TAX_RATE = float(os.getenv("DEFAULT_TAX_RATE", "7.7"))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

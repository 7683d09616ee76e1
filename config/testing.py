import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_promotion_test_db"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

LOG_LEVEL = "WARNING"
LOG_JSON = False

APPOINTMENT_FORM_KEY = "personnelappointment"

# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER")

# pricing
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.08"))
SHIPPING_STANDARD = os.getenv("SHIPPING_STANDARD", "9.99")
SHIPPING_EXPRESS = os.getenv("SHIPPING_EXPRESS", "19.99")
FREE_SHIPPING_THRESHOLD = os.getenv("FREE_SHIPPING_THRESHOLD", "100.00")

# "reject" fails checkout on a bad coupon, "ignore" drops the discount
COUPON_POLICY = os.getenv("COUPON_POLICY", "reject").strip().lower()

PAYMENT_DECLINE_CARD = os.getenv("PAYMENT_DECLINE_CARD", "4000000000000002")

DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", 10))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", 100))

DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", 3))
STATUS_RETRY_ATTEMPTS = int(os.getenv("STATUS_RETRY_ATTEMPTS", 3))

SEED_DEMO_DATA = _flag("SEED_DEMO_DATA")

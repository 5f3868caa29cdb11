# storefront/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.domain.errors import StatusConflict
from storefront.utils.settings import DB_RETRY_ATTEMPTS, STATUS_RETRY_ATTEMPTS


def db_retry():
    # transient storage failures, e.g. "database is locked" on sqlite
    return retry(
        reraise=True,
        stop=stop_after_attempt(DB_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
    )


def status_retry():
    # conditional status update lost a race, re-read and re-validate
    return retry(
        reraise=True,
        stop=stop_after_attempt(STATUS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(StatusConflict),
    )

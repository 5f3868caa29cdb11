# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Customer notifications about orders.
    Dispatched through Celery after the database commit, a broker outage
    is logged and never fails the request that triggered it.
    """

    @staticmethod
    def order_placed(user_id: int, order_id: int, total: str):
        _dispatch(send_order_placed_task, user_id, order_id, total)

    @staticmethod
    def order_status_changed(user_id: int, order_id: int, old_status: str, new_status: str):
        _dispatch(send_order_status_task, user_id, order_id, old_status, new_status)


def _dispatch(task, *args):
    try:
        task.delay(*args)
    except Exception as e:
        logger.warning(f"Could not queue {task.name} {args}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(user_id: int, order_id: int, total: str):
    """
    Celery task, a real deployment would send email/SMS/push here.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, total {total}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_order_status_task")
def send_order_status_task(user_id: int, order_id: int, old_status: str, new_status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} {old_status} -> {new_status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}

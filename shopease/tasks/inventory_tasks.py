import logging

from shopease.config import get_settings
from shopease.database import SessionLocal
from shopease.models.product import Product
from shopease.tasks.celery_app import celery_app
from shopease.utils.cache import cache_service

logger = logging.getLogger(__name__)
settings = get_settings()

ALERT_PREFIX = "stock_alert"


@celery_app.task(name="shopease.tasks.inventory_tasks.check_stock_level")
def check_stock_level(product_id: int) -> dict:
    """
    Background task run after a sale commits.

    Logs a low-stock alert when the product's stock drops to
    LOW_STOCK_THRESHOLD or below. An alert is raised once per product until
    the cooldown expires or the product is restocked above the threshold.
    Never modifies data.

    Args:
        product_id: ID of the product whose stock just changed

    Returns:
        Dictionary describing the check result
    """
    db = SessionLocal()

    try:
        product = db.query(Product).filter(Product.product_id == product_id).first()

        if not product:
            logger.info(f"Stock check skipped: product #{product_id} no longer exists")
            return {"status": "missing", "product_id": product_id}

        stock = product.stock_quantity
        threshold = settings.LOW_STOCK_THRESHOLD

        if stock > threshold:
            # Restocked: let the next shortage alert again
            cache_service.delete(ALERT_PREFIX, str(product_id))
            return {"status": "ok", "product_id": product_id, "stock_quantity": stock}

        if not cache_service.add(ALERT_PREFIX, str(product_id), {"stock_quantity": stock}):
            return {"status": "suppressed", "product_id": product_id, "stock_quantity": stock}

        level = "out of stock" if stock == 0 else "low stock"
        logger.warning(
            f"Inventory alert: product #{product_id} '{product.product_name}' is {level} "
            f"({stock} left, threshold {threshold})"
        )
        return {"status": "alerted", "product_id": product_id, "stock_quantity": stock}

    finally:
        db.close()

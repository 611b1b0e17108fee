"""Order service configuration, read from the environment."""

import os

SERVICE_NAME = "order-service"

HOST = os.getenv("ORDER_HOST", "0.0.0.0")
PORT = int(os.getenv("ORDER_PORT", "9000"))
PAYMENT_URL = os.getenv("PAYMENT_SERVICE_BASE_URL", "http://localhost:5201")
SHIPPING_URL = os.getenv("SHIPPING_SERVICE_BASE_URL", "http://localhost:5202")
DEPENDENCY_TIMEOUT_MS = int(os.getenv("DEPENDENCY_TIMEOUT_MS", "1500"))
DESTINATION_POSTAL_CODE = os.getenv("SHIPPING_DESTINATION_POSTAL_CODE", "10001")
SYNTHESIZE_MISSING = os.getenv("ORDER_SYNTHESIZE_MISSING", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

import logging

import uvicorn

from order_service.app import app
from order_service.config import HOST, PORT

logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("order-service listening on http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()

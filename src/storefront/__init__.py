import logging
from src.utils.logger import setup_logger

storefront_logger = setup_logger(
    "storefront",
    logging.DEBUG,
    log_file="storefront_app.log"
)

from dotenv import load_dotenv
from loguru import logger

from clinic_scheduling.api.availability_server import run_server
from clinic_scheduling.config import configure_logging

load_dotenv()


if __name__ == "__main__":
    configure_logging()
    logger.info("Starting clinic availability service")
    run_server()

import uvicorn

from account_service.core.config import settings
from account_service.utils.logging import setup_logging

if __name__ == "__main__":
    setup_logging("backend.log", level="DEBUG" if settings.is_dev else "INFO")
    uvicorn.run(
        "account_service.main:app", host="127.0.0.1", port=8085, log_config=None, log_level=None
    )

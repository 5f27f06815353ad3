"""
Logging utilities for the HS Code classification assistant.
"""
import sys
from pathlib import Path

from loguru import logger

from hscode_centrovert.config.settings import Config


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"

def setup_logger(front_end: str = "cli") -> Path:
    """
    Route logs to stderr (INFO) and to the front end's rotating log file (DEBUG).

    Args:
        front_end: "cli" or "streamlit"

    Returns:
        Path of the log file
    """
    log_filename = Config.STREAMLIT_LOG_FILE if front_end == "streamlit" else Config.MAIN_LOG_FILE
    log_file = Config.LOGS_DIR / log_filename
    Config.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level="INFO")
    logger.add(
        log_file,
        rotation=Config.LOG_ROTATION,
        retention=Config.LOG_RETENTION_DAYS,
        compression=Config.LOG_COMPRESSION,
        format=FILE_FORMAT,
        level="DEBUG"
    )

    logger.info(f"Logging to {log_file}")
    return log_file

def log_classification_attempt(description: str, region: str, has_image: bool = False) -> None:
    """Log classification attempt with standardized format."""
    logger.info(f"🔍 Classification attempt: '{description[:50]}...' | Region: {region} | Image: {has_image}")

def log_connector_outcome(connector: str, status: str, detail: str = "") -> None:
    """Log the outcome of a live-data connector lookup."""
    if status == "match":
        logger.info(f"✅ [{connector}] Live match found")
    elif status == "auth_error":
        logger.error(f"❌ [{connector}] Authentication failed. {detail}")
    elif status in ("no_match", "skipped"):
        logger.info(f"[{connector}] {status}: {detail}")
    else:
        logger.warning(f"⚠️ [{connector}] {status}: {detail}")

def log_evidence_summary(region: str, matched: int, attempted: int) -> None:
    """Log how much live evidence was gathered for a request."""
    logger.info(f"📊 Evidence for {region}: {matched}/{attempted} connectors matched")

def log_model_invocation(model_name: str, tools: list, parts: int) -> None:
    """Log details about a model invocation."""
    logger.info(f"🔮 Invoking {model_name} | Tools: {tools or 'none'} | Parts: {parts}")

def log_system_startup(component: str) -> None:
    """Log system component startup."""
    logger.info(f"🚀 Starting {component}")

def log_system_error(component: str, error: str) -> None:
    """Log system errors with standardized format."""
    logger.error(f"❌ {component} Error: {error}")

def log_system_success(component: str, message: str) -> None:
    """Log system success with standardized format."""
    logger.success(f"✅ {component}: {message}")

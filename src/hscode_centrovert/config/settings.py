"""
Centralized configuration settings for the HS Code classification assistant.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_int(name: str):
    value = os.getenv(name)
    return int(value) if value else None


class Config:
    """Main configuration class containing all system settings."""
    
    # Base paths
    BASE_DIR = Path(__file__).parent.parent.parent.parent
    LOGS_DIR = Path(os.getenv('HSCODE_LOGS_DIR', BASE_DIR / "logs"))
    
    # Gemini Configuration
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY') or os.getenv('API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', "gemini-2.5-flash")
    MODEL_TEMPERATURE = 0.1
    SYSTEM_INSTRUCTION = (
        "You are a strict and precise trade compliance AI. You prioritize official "
        "national tariff books over generic HS codes. You ALWAYS output valid raw JSON."
    )
    # None leaves the deadline to the caller
    MODEL_TIMEOUT_MS = _optional_int('MODEL_TIMEOUT_MS')
    
    # Live connector Configuration
    CONNECTOR_TIMEOUT_MS = int(os.getenv('CONNECTOR_TIMEOUT_MS', '5000'))
    # Threads available for in-flight connector fetches
    FETCH_WORKERS = int(os.getenv('FETCH_WORKERS', '8'))
    
    SINGAPORE_API_URL = "https://data.gov.sg/api/action/datastore_search"
    SINGAPORE_RESOURCE_ID = os.getenv('SINGAPORE_RESOURCE_ID', "d_8cfe111e0a5a5cf5b598e78851e58ad4")
    SINGAPORE_API_KEY = os.getenv('SINGAPORE_API_KEY')
    SINGAPORE_RECORD_LIMIT = 3
    MAX_EVIDENCE_RECORDS = 5
    
    UAE_API_URL = "https://api.dubaipulse.gov.ae/shared/customs"
    UAE_API_TOKEN = os.getenv('UAE_API_TOKEN')
    
    SAUDI_API_URL = "https://zatca.gov.sa/api/tariff/v1/search"
    SAUDI_API_TOKEN = os.getenv('SAUDI_API_TOKEN')
    SAUDI_CLIENT_ID = os.getenv('SAUDI_CLIENT_ID', "HScodeCentrovert-App")
    
    # Classification Settings
    LIVE_SOURCE_CONFIDENCE_THRESHOLD = 85
    MATCH_CONFIDENCE_FLOOR = 95
    MIN_SIMILAR_ITEMS = 5
    RAW_RESPONSE_PREVIEW_CHARS = 500
    DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
    
    # Logging Settings
    LOG_ROTATION = "500 MB"
    LOG_RETENTION_DAYS = "30 days"
    LOG_COMPRESSION = "zip"
    MAIN_LOG_FILE = "hscode_assistant.log"
    STREAMLIT_LOG_FILE = "streamlit_app.log"

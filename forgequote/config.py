import os
from pathlib import Path
from dotenv import load_dotenv

# Base Directories
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables
if not os.environ.get("VERCEL"):
    load_dotenv(BASE_DIR / ".env")
else:
    # On Vercel, env vars are injected by the platform
    pass

# AI Provider Configuration
AI_PROVIDER = os.getenv("AI_PROVIDER", "gemini").strip().lower()
SUPPORTED_PROVIDERS = ("gemini", "openai", "cohere")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
GPT_MODEL = os.getenv("GPT_MODEL", "gpt-4o-mini")
HF_BASE_URL = "https://router.huggingface.co/v1"  # used when OPENAI_API_KEY is an hf_ token

COHERE_API_KEY = os.getenv("COHERE_API_KEY")
COHERE_MODEL = os.getenv("COHERE_MODEL", "command-r-plus")

AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

# Upload Configuration
UPLOAD_FIELD = "file"
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
MAX_FILE_SIZE = MAX_FILE_SIZE_MB * 1024 * 1024
# Multipart framing on top of the file itself
MAX_REQUEST_SIZE = MAX_FILE_SIZE + 1024 * 1024
DEFAULT_BINARY_MIME = "application/pdf"

# CORS Configuration
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()] or ["*"]
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# Messages
DEFAULT_SERVER_ERROR = "서버 처리 중 오류 발생"

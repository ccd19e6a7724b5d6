import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# LLM defaults (any OpenAI-compatible /chat/completions endpoint)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1/")
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.1-8b-instruct")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "1024"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))

# Number of most recent messages sent along with each turn
CONTEXT_WINDOW = int(os.getenv("CONTEXT_WINDOW", "6"))

SYSTEM_PROMPT = (
    "You are an AI research assistant. Help users with research tasks, provide detailed analysis, "
    "and break down complex topics. Be thorough and cite sources when possible."
)
FALLBACK_REPLY = "I apologize, but I received an empty response. Please try asking your question again."
DEFAULT_TITLE = "New Research Session"

# Session storage: one key-value partition per workspace
WORKSPACE_ID = os.getenv("WORKSPACE_ID", "research-session")
STORE_BACKEND = os.getenv("STORE_BACKEND", "sqlite").lower()
STORE_PATH = Path(os.getenv("STORE_PATH", str(DATA_DIR / "sessions.db")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

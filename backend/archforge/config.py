import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

LLM_BASE_URL = os.getenv(
    "LLM_BASE_URL",
    "https://generativelanguage.googleapis.com/v1beta/openai",
)
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-1.5-flash")
LLM_API_KEY = os.getenv(
    "LLM_API_KEY",
    os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_GENERATIVE_AI_API_KEY", "")),
)
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.9"))

# Simulated computation time before responding
ARCHITECT_DELAY_SECONDS = float(os.getenv("ARCHITECT_DELAY_SECONDS", "0.8"))
ENHANCE_DELAY_SECONDS = float(os.getenv("ENHANCE_DELAY_SECONDS", "1.5"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

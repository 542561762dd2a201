"""
Single place to read settings from the environment.
A local .env is loaded first (dev convenience; in prod the platform injects env vars).
"""

import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Hint service. Without a key the hint endpoint still answers, with the fallback message.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
HINT_MODEL = os.getenv("HINT_MODEL", "gemini-3-pro-preview")
HINT_API_URL = os.getenv("HINT_API_URL", "https://generativelanguage.googleapis.com/v1beta/models")
HINT_TIMEOUT_SECONDS = float(os.getenv("HINT_TIMEOUT_SECONDS", "30"))
HINT_WORKERS = int(os.getenv("HINT_WORKERS", "4"))
HINT_LANGUAGE = os.getenv("HINT_LANGUAGE", "English")

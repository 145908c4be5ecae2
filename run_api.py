"""
Run the Inventory AI Assistant REST API.

Usage:
    python run_api.py

Environment variables (all optional):
    JWT_SECRET             Secret key used to verify bearer tokens (change in production!)
    JWT_ALGORITHM          Token signing algorithm (default: HS256)
    LLM_PROVIDER           "openai", "groq", or "ollama" (default: ollama)
    LLM_MODEL_OPENAI       Model name when LLM_PROVIDER=openai (default: gpt-4.1-mini)
    LLM_MODEL_GROQ         Model name when LLM_PROVIDER=groq (default: llama-3.3-70b-versatile)
    LLM_MODEL_OLLAMA       Model name when LLM_PROVIDER=ollama (default: llama3.2)
    OPENAI_API_KEY         Required when LLM_PROVIDER=openai
    GROQ_API_KEY           Required when LLM_PROVIDER=groq
    OLLAMA_BASE_URL        Ollama server URL (default: http://localhost:11434/)
    AGENT_MAX_ITERATIONS   Reasoning rounds per turn (default: 5)
    AGENT_TIMEOUT_SECONDS  Deadline for one chat turn (default: 60)
    SESSION_MAX_TURNS      Turns kept per conversation (default: 10)
    SESSION_TTL_SECONDS    Idle time before a conversation is forgotten (default: 3600)
    DB_PATH                SQLite database file path (default: inventory.db)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "adapters.rest.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

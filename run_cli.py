"""
Run the Inventory AI Assistant CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    init       Create the database schema
    seed       Insert demo products, customers and sales for a user
    ask        One-shot question to the agent
    chat       Interactive chat session (/reset clears the conversation)
    report     Print low_stock, movement_summary or category_summary

Examples:
    python run_cli.py init
    python run_cli.py seed 0b6e1f0e-4c1a-4d0e-9a55-2f1f3c9c7d11
    python run_cli.py ask 0b6e1f0e-4c1a-4d0e-9a55-2f1f3c9c7d11 "what is low on stock?"
    python run_cli.py report category_summary

Environment variables (all optional):
    LLM_PROVIDER        "openai", "groq", or "ollama" (default: ollama)
    LLM_MODEL_OPENAI    Model name when LLM_PROVIDER=openai (default: gpt-4.1-mini)
    LLM_MODEL_GROQ      Model name when LLM_PROVIDER=groq (default: llama-3.3-70b-versatile)
    LLM_MODEL_OLLAMA    Model name when LLM_PROVIDER=ollama (default: llama3.2)
    OPENAI_API_KEY      Required when LLM_PROVIDER=openai
    GROQ_API_KEY        Required when LLM_PROVIDER=groq
    DB_PATH             SQLite database file path (default: inventory.db)
    OLLAMA_BASE_URL     Ollama server URL (default: http://localhost:11434/)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()

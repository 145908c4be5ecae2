"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (and a
.env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the inventory assistant.

    No module-level globals. Construct via from_env() or pass explicitly
    in tests.
    """
    project_root: Path

    # ── LLM Provider ────────────────────────────────────────────
    # Allowed: "openai", "groq", "ollama"
    llm_provider: str = "ollama"

    # Model names, only the one matching llm_provider is used.
    llm_model_ollama: str = "llama3.2"
    llm_model_openai: str = "gpt-4.1-mini"
    llm_model_groq: str = "llama-3.3-70b-versatile"

    # Connection details
    ollama_base_url: str = "http://localhost:11434/"
    groq_api_key: str = ""
    openai_api_key: str = ""

    # Agent
    agent_max_iterations: int = 5
    agent_timeout_seconds: float = 60.0

    # Session memory
    session_max_turns: int = 10
    session_ttl_seconds: float = 3600.0
    session_max_sessions: int = 1000

    # Database
    db_path: str = "inventory.db"

    # JWT (tokens are issued elsewhere, only verified here)
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"

    @property
    def active_llm_model(self) -> str:
        """Return the model name for the currently active LLM provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        elif self.llm_provider == "groq":
            return self.llm_model_groq
        return self.llm_model_ollama

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> Settings:
        """Build Settings from environment variables."""
        from dotenv import load_dotenv
        load_dotenv()

        root = project_root or Path(__file__).resolve().parent.parent.parent

        return cls(
            project_root=root,

            llm_provider=os.getenv("LLM_PROVIDER", "ollama").lower().strip(),
            llm_model_ollama=os.getenv("LLM_MODEL_OLLAMA", "llama3.2"),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4.1-mini"),
            llm_model_groq=os.getenv("LLM_MODEL_GROQ", "llama-3.3-70b-versatile"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),

            agent_max_iterations=int(os.getenv("AGENT_MAX_ITERATIONS", "5")),
            agent_timeout_seconds=float(os.getenv("AGENT_TIMEOUT_SECONDS", "60")),

            session_max_turns=int(os.getenv("SESSION_MAX_TURNS", "10")),
            session_ttl_seconds=float(os.getenv("SESSION_TTL_SECONDS", "3600")),
            session_max_sessions=int(os.getenv("SESSION_MAX_SESSIONS", "1000")),

            db_path=os.getenv("DB_PATH", "inventory.db"),
            jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        )

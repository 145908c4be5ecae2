"""
Shared fixtures for the inventory assistant tests.

Each test gets its own file-backed SQLite database under tmp_path with the
schema applied. Orchestrator tests drive a scripted chat model instead of
a real provider.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

import pytest
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult

from agent.memory import SessionMemoryStore
from application.context import SessionContext
from application.dto import NewProduct
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.customer_repo import SQLiteCustomerRepository
from infrastructure.persistence.migrations import run_migrations
from infrastructure.persistence.movement_repo import SQLiteInventoryRepository
from infrastructure.persistence.product_repo import SQLiteProductRepository
from infrastructure.persistence.sales_repo import SQLiteSalesRepository
from application.services.customers import CustomerService
from application.services.products import ProductService
from application.services.reports import ReportService
from application.services.sales import SalesService


# ============================================================
# Scripted chat model
# ============================================================

class ScriptedChatModel(BaseChatModel):
    """Replays queued replies; an Exception in the queue is raised instead.

    Every call's message list is kept in ``received`` so tests can inspect
    the prompt and the tool results fed back to the model.
    """

    replies: list[Any] = []
    received: list[list[BaseMessage]] = []
    bound_tools: list[str] = []
    delay: float = 0.0

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = [t.name for t in tools]
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.received.append(list(messages))
        if not self.replies:
            raise AssertionError("ScriptedChatModel ran out of replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return ChatResult(generations=[ChatGeneration(message=reply)])

    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._generate(messages, stop=stop, **kwargs)


def tool_call(tool_name: str, /, call_id: str = "call_1", **args: Any) -> AIMessage:
    """An assistant message asking for a single tool call."""
    return AIMessage(content="", tool_calls=[{"name": tool_name, "args": args, "id": call_id}])


def answer(text: str) -> AIMessage:
    return AIMessage(content=text)


# ============================================================
# Database and services
# ============================================================

@pytest.fixture
def user_id() -> str:
    return str(uuid4())


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "inventory_test.db")


@pytest.fixture
async def connection(db_path) -> AsyncSQLiteConnection:
    conn = AsyncSQLiteConnection(db_path)
    await run_migrations(conn)
    return conn


@pytest.fixture
def product_repo(connection) -> SQLiteProductRepository:
    return SQLiteProductRepository(connection)


@pytest.fixture
def inventory_repo(connection) -> SQLiteInventoryRepository:
    return SQLiteInventoryRepository(connection)


@pytest.fixture
def customer_repo(connection) -> SQLiteCustomerRepository:
    return SQLiteCustomerRepository(connection)


@pytest.fixture
def sales_repo(connection) -> SQLiteSalesRepository:
    return SQLiteSalesRepository(connection)


@pytest.fixture
def product_service(product_repo, inventory_repo) -> ProductService:
    return ProductService(product_repo=product_repo, inventory_repo=inventory_repo)


@pytest.fixture
def customer_service(customer_repo) -> CustomerService:
    return CustomerService(customer_repo=customer_repo)


@pytest.fixture
def sales_service(sales_repo) -> SalesService:
    return SalesService(sales_repo=sales_repo)


@pytest.fixture
def report_service(product_repo, inventory_repo) -> ReportService:
    return ReportService(product_repo=product_repo, inventory_repo=inventory_repo)


@pytest.fixture
def make_product(product_service, user_id):
    """Create a product through the service; returns the CreatedProduct."""
    async def _make(
        name: str = "Widget",
        stock_quantity: int = 10,
        min_stock_level: Optional[int] = None,
        price: str = "9.99",
        category: Optional[str] = None,
        description: Optional[str] = None,
        barcode: Optional[str] = None,
    ):
        return await product_service.create_product(NewProduct(
            name=name,
            price=Decimal(price),
            stock_quantity=stock_quantity,
            user_id=user_id,
            min_stock_level=min_stock_level,
            category=category,
            description=description,
            barcode=barcode,
        ))
    return _make


# ============================================================
# Agent wiring
# ============================================================

@pytest.fixture
def settings(db_path, tmp_path) -> Settings:
    return Settings(
        project_root=tmp_path,
        db_path=db_path,
        agent_max_iterations=4,
        agent_timeout_seconds=5.0,
        jwt_secret="test-secret",
    )


@pytest.fixture
def scripted_llm() -> ScriptedChatModel:
    return ScriptedChatModel()


@pytest.fixture
async def factory(settings, scripted_llm) -> ServiceFactory:
    f = ServiceFactory(settings, llm=scripted_llm)
    await f.initialize()
    return f


@pytest.fixture
def memory(factory) -> SessionMemoryStore:
    return factory.memory


@pytest.fixture
def ctx(user_id) -> SessionContext:
    return SessionContext(user_id=user_id)

"""
factory - Composition root for the inventory assistant.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services and agents.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    await factory.initialize()  # one-time startup

    # For direct service access (diagnostics, reports):
    service = factory.create_report_service()
    report = await service.inventory_report(ReportRequest(type="low_stock"))

    # For the conversational agent (CLI, REST chat):
    agent = factory.create_agent()
    result = await agent.submit_message(ctx, user_input)
"""

from __future__ import annotations

import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel

from infrastructure.config import Settings
from infrastructure.llm.llm_builder import build_llm
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
from agent.executor import AgentExecutor
from agent.memory import SessionMemoryStore
from agent.tools.create_customer import CreateCustomerTool
from agent.tools.create_product import CreateProductTool
from agent.tools.get_customers import GetCustomersTool
from agent.tools.get_inventory_report import GetInventoryReportTool
from agent.tools.get_products import GetProductsTool
from agent.tools.get_sales import GetSalesTool
from agent.tools.registry import ToolRegistry
from agent.tools.update_stock import UpdateStockTool

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root, wires all dependencies together.

    Call initialize() once at startup, then create services/agents as needed.
    The session memory store lives as long as the factory, so every agent
    created here shares it.
    """

    def __init__(self, config: Settings, llm: Optional[BaseChatModel] = None):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._memory = SessionMemoryStore(
            max_turns=config.session_max_turns,
            ttl_seconds=config.session_ttl_seconds,
            max_sessions=config.session_max_sessions,
        )
        self._llm = llm
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def memory(self) -> SessionMemoryStore:
        return self._memory

    @property
    def connection(self) -> AsyncSQLiteConnection:
        return self._connection

    async def initialize(self) -> None:
        """One-time startup: run migrations.

        Must be called before creating services or agents.
        """
        logger.info("Initializing ServiceFactory (db=%s)...", self._config.db_path)
        await run_migrations(self._connection)
        logger.info("Database migrations complete")
        self._initialized = True
        logger.info("ServiceFactory ready")

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def create_product_repository(self) -> SQLiteProductRepository:
        return SQLiteProductRepository(self._connection)

    def create_inventory_repository(self) -> SQLiteInventoryRepository:
        return SQLiteInventoryRepository(self._connection)

    def create_customer_repository(self) -> SQLiteCustomerRepository:
        return SQLiteCustomerRepository(self._connection)

    def create_sales_repository(self) -> SQLiteSalesRepository:
        return SQLiteSalesRepository(self._connection)

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_product_service(self) -> ProductService:
        """Create a ProductService with both repositories wired."""
        self._ensure_initialized()
        return ProductService(
            product_repo=self.create_product_repository(),
            inventory_repo=self.create_inventory_repository(),
        )

    def create_customer_service(self) -> CustomerService:
        self._ensure_initialized()
        return CustomerService(customer_repo=self.create_customer_repository())

    def create_sales_service(self) -> SalesService:
        self._ensure_initialized()
        return SalesService(sales_repo=self.create_sales_repository())

    def create_report_service(self) -> ReportService:
        self._ensure_initialized()
        return ReportService(
            product_repo=self.create_product_repository(),
            inventory_repo=self.create_inventory_repository(),
        )

    # ------------------------------------------------------------------
    # Agent creation
    # ------------------------------------------------------------------

    def create_tool_registry(self) -> ToolRegistry:
        """Register the seven inventory tools against the shared memory store."""
        product_service = self.create_product_service()
        customer_service = self.create_customer_service()

        registry = ToolRegistry(memory=self._memory)
        registry.register(GetProductsTool(product_service))
        registry.register(CreateProductTool(product_service))
        registry.register(UpdateStockTool(product_service))
        registry.register(GetCustomersTool(customer_service))
        registry.register(CreateCustomerTool(customer_service))
        registry.register(GetSalesTool(self.create_sales_service()))
        registry.register(GetInventoryReportTool(self.create_report_service()))
        return registry

    def create_agent(self) -> AgentExecutor:
        """Create a fully configured AgentExecutor.

        The executor is stateless between turns; session state lives in
        the factory's memory store, keyed by ctx.session_id.
        """
        self._ensure_initialized()
        return AgentExecutor(
            llm=self._build_agent_llm(),
            tools=self.create_tool_registry(),
            memory=self._memory,
            max_iterations=self._config.agent_max_iterations,
            timeout_seconds=self._config.agent_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_agent_llm(self) -> BaseChatModel:
        """Build the chat model for the agent, once per factory."""
        if self._llm is None:
            cfg = self._config
            self._llm = build_llm(
                provider=cfg.llm_provider,
                model=cfg.active_llm_model,
                temperature=0,
                ollama_base_url=cfg.ollama_base_url,
                openai_api_key=cfg.openai_api_key,
                groq_api_key=cfg.groq_api_key,
                timeout=cfg.agent_timeout_seconds,
            )
        return self._llm

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )

"""Demo data seeding and environment configuration."""

import pytest

from application.dto import ProductQuery, ReportRequest, SalesQuery
from infrastructure.config import Settings
from infrastructure.llm.llm_builder import build_llm
from infrastructure.persistence.seed import seed_demo_data


async def test_seed_keeps_ledger_consistent(connection, product_service, inventory_repo, sales_service, report_service, user_id):
    summary = await seed_demo_data(connection, user_id)

    assert summary.products == 6
    assert summary.sales == 2

    products = await product_service.list_products(ProductQuery())
    for p in products:
        movements = await inventory_repo.get_by_product(p.id)
        assert movements[0].new_stock == p.stock_quantity
        assert movements[-1].previous_stock == 0

    sales = await sales_service.list_sales(SalesQuery())
    assert {s.customer for s in sales} == {"Alice Martin", "Walk-in Customer"}

    low = await report_service.inventory_report(ReportRequest(type="low_stock"))
    assert {p.name for p in low.products} == {"USB-C Cable", "Standing Desk", "Gel Pen"}


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LLM_PROVIDER", "Groq")
    monkeypatch.setenv("AGENT_MAX_ITERATIONS", "7")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "120")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "x.db"))

    settings = Settings.from_env(project_root=tmp_path)

    assert settings.llm_provider == "groq"
    assert settings.active_llm_model == settings.llm_model_groq
    assert settings.agent_max_iterations == 7
    assert settings.session_ttl_seconds == 120.0
    assert settings.db_path == str(tmp_path / "x.db")


def test_unknown_provider_is_rejected():
    with pytest.raises(ValueError, match="Unsupported LLM_PROVIDER"):
        build_llm(provider="watson", model="x")


def test_hosted_provider_needs_a_key():
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        build_llm(provider="openai", model="gpt-4.1-mini", openai_api_key="")

"""Conversational turns driven by a scripted chat model."""

import pytest
from langchain_core.messages import HumanMessage, SystemMessage, ToolMessage

from application.context import SessionContext
from application.dto import CustomerQuery, ProductQuery
from domain.exceptions import UnauthorizedError

from conftest import answer, tool_call


@pytest.fixture
def agent(factory):
    return factory.create_agent()


def _tool_messages(messages):
    return [m for m in messages if isinstance(m, ToolMessage)]


async def test_plain_answer_is_returned_and_remembered(agent, scripted_llm, memory, ctx):
    scripted_llm.replies = [answer("Hello! How can I help with your inventory?")]

    result = await agent.submit_message(ctx, "hi")

    assert result.succeeded
    assert result.text == "Hello! How can I help with your inventory?"
    turns = memory.get_or_create(ctx.session_id).turns
    assert [(t.role, t.content) for t in turns] == [
        ("user", "hi"),
        ("assistant", "Hello! How can I help with your inventory?"),
    ]


async def test_prompt_carries_context_and_tagged_user_message(agent, scripted_llm, ctx, user_id):
    scripted_llm.replies = [answer("ok")]

    await agent.submit_message(ctx, "show me low stock")

    system, human = scripted_llm.received[0]
    assert isinstance(system, SystemMessage)
    assert "USER: show me low stock" in system.content
    assert f"- User ID: {user_id}" in system.content
    assert isinstance(human, HumanMessage)
    assert human.content == f"[USER_ID: {user_id}] show me low stock"
    assert "update_stock" in scripted_llm.bound_tools


async def test_tool_output_is_fed_back_to_the_model(agent, scripted_llm, ctx, make_product):
    await make_product(name="Widget", stock_quantity=3, min_stock_level=5)
    scripted_llm.replies = [
        tool_call("get_inventory_report", type="low_stock", days=None),
        answer("Widget is running low."),
    ]

    result = await agent.submit_message(ctx, "what is running low?")

    assert result.text == "Widget is running low."
    [tool_message] = _tool_messages(scripted_llm.received[1])
    assert '"Widget"' in tool_message.content
    assert tool_message.tool_call_id == "call_1"


async def test_remembered_product_is_used_when_product_id_is_missing(agent, scripted_llm, memory, ctx, make_product, product_service):
    widget = await make_product(name="Widget", stock_quantity=3, min_stock_level=5)
    await make_product(name="Gizmo", stock_quantity=50)

    scripted_llm.replies = [
        tool_call("get_products", search="Widget", category=None, low_stock=None),
        answer("Widget has 3 units in stock."),
    ]
    first = await agent.submit_message(ctx, "how many widgets do we have?")
    assert first.succeeded
    assert memory.get_or_create(ctx.session_id).context.current_product.id == widget.id

    scripted_llm.replies = [
        tool_call("update_stock", call_id="call_2", quantity=10, movement_type="purchase", notes=None),
        answer("Added 10 units."),
    ]
    second = await agent.submit_message(ctx, "add 10 more")

    assert second.succeeded
    [tool_message] = _tool_messages(scripted_llm.received[-1])
    assert '"new_stock": 13' in tool_message.content
    [stored] = await product_service.list_products(ProductQuery(search="Widget"))
    assert stored.stock_quantity == 13
    context = memory.get_or_create(ctx.session_id).context
    assert context.last_action == 'Updated stock for "Widget" by 10 (purchase)'


async def test_null_spelled_product_id_uses_remembered_product(agent, scripted_llm, ctx, make_product, product_service):
    await make_product(name="Widget", stock_quantity=3, min_stock_level=5)
    scripted_llm.replies = [
        tool_call("get_products", search="Widget", category=None, low_stock=None),
        answer("Widget has 3 units in stock."),
    ]
    await agent.submit_message(ctx, "how many widgets do we have?")

    scripted_llm.replies = [
        tool_call("update_stock", call_id="call_2", product_id="null", quantity=10, movement_type="purchase", notes=None),
        answer("Added 10 units."),
    ]
    result = await agent.submit_message(ctx, "add 10 more")

    assert result.succeeded
    [stored] = await product_service.list_products(ProductQuery(search="Widget"))
    assert stored.stock_quantity == 13


async def test_authenticated_user_overrides_model_supplied_user(agent, scripted_llm, ctx, user_id, product_service):
    scripted_llm.replies = [
        tool_call(
            "create_product",
            name="Lamp", description=None, price="12.50", stock_quantity=8,
            min_stock_level=None, category=None, barcode=None, user_id="abc",
        ),
        answer("Created Lamp."),
    ]

    result = await agent.submit_message(ctx, "create a lamp at 12.50 with 8 in stock")

    assert result.succeeded
    [lamp] = await product_service.list_products(ProductQuery(search="Lamp"))
    assert lamp.name == "Lamp"


async def test_products_and_customers_are_created_through_the_agent(agent, scripted_llm, memory, ctx, product_service, customer_service):
    scripted_llm.replies = [
        tool_call(
            "create_product",
            name="Gadget", description=None, price=19.99, stock_quantity=4,
            min_stock_level=None, category=None, barcode=None, user_id=None,
        ),
        tool_call(
            "create_customer", call_id="call_2",
            name="Ada", email="ada@example.com", phone=None, address=None, user_id=None,
        ),
        answer("Created Gadget and Ada."),
    ]

    result = await agent.submit_message(ctx, "add a gadget at 19.99 and a customer Ada")

    assert result.succeeded, result.error_detail
    [gadget] = await product_service.list_products(ProductQuery(search="Gadget"))
    assert gadget.stock_quantity == 4
    [ada] = await customer_service.list_customers(CustomerQuery(search="Ada"))
    assert ada.email == "ada@example.com"
    context = memory.get_or_create(ctx.session_id).context
    assert context.current_product.name == "Gadget"
    assert context.current_customer.name == "Ada"


async def test_user_correctable_error_becomes_the_answer(agent, scripted_llm, memory, ctx, make_product):
    bolt = await make_product(name="Bolt", stock_quantity=2)
    scripted_llm.replies = [
        tool_call("update_stock", product_id=bolt.id, quantity=-5, movement_type="sale", notes=None),
    ]

    result = await agent.submit_message(ctx, "sell 5 bolts")

    assert not result.succeeded
    assert not result.retryable
    assert "Insufficient stock" in result.text
    assert '"Bolt" has 2 in stock' in result.error_detail
    turns = memory.get_or_create(ctx.session_id).turns
    assert [t.role for t in turns] == ["user", "assistant"]
    assert turns[-1].content == result.text


async def test_product_name_instead_of_id_is_explained(agent, scripted_llm, ctx):
    scripted_llm.replies = [
        tool_call("update_stock", product_id="Widget", quantity=1, movement_type="purchase", notes=None),
    ]

    result = await agent.submit_message(ctx, "add one widget")

    assert not result.succeeded
    assert 'Invalid product ID format: "Widget"' in result.text


async def test_provider_failure_gives_generic_answer(agent, scripted_llm, memory, ctx):
    scripted_llm.replies = [RuntimeError("provider down")]

    result = await agent.submit_message(ctx, "hello")

    assert not result.succeeded
    assert result.retryable
    assert "provider down" in result.error_detail
    assert "provider down" not in result.text
    assert [t.role for t in memory.get_or_create(ctx.session_id).turns] == ["user", "assistant"]


async def test_store_failure_is_retryable(agent, factory, scripted_llm, memory, ctx, tmp_path, monkeypatch):
    monkeypatch.setattr(factory.connection, "_db_path", str(tmp_path / "missing" / "inventory.db"))
    scripted_llm.replies = [
        tool_call("get_products", search=None, category=None, low_stock=None),
    ]

    result = await agent.submit_message(ctx, "list products")

    assert not result.succeeded
    assert result.retryable
    assert "Database operation failed" in result.error_detail
    assert "Database" not in result.text
    assert [t.role for t in memory.get_or_create(ctx.session_id).turns] == ["user", "assistant"]


async def test_deadline_exceeded_is_retryable(agent, scripted_llm, memory, ctx):
    scripted_llm.delay = 1.0
    scripted_llm.replies = [answer("too late")]

    result = await agent.submit_message(ctx, "slow question", timeout=0.05)

    assert not result.succeeded
    assert result.retryable
    turns = memory.get_or_create(ctx.session_id).turns
    assert [t.role for t in turns] == ["user", "assistant"]
    assert turns[-1].content == result.text


async def test_reasoning_rounds_are_bounded(agent, scripted_llm, settings, ctx):
    scripted_llm.replies = [
        tool_call("get_products", call_id=f"call_{i}", category=None, low_stock=None, search=None)
        for i in range(settings.agent_max_iterations)
    ]

    result = await agent.submit_message(ctx, "loop forever")

    assert not result.succeeded
    assert "reasoning rounds" in result.error_detail


async def test_json_printed_tool_call_is_executed(agent, scripted_llm, memory, ctx):
    scripted_llm.replies = [
        answer('```json\n{"name": "get_inventory_report", "parameters": {"type": "low_stock", "days": null}}\n```'),
        answer("Nothing is low on stock."),
    ]

    result = await agent.submit_message(ctx, "anything low?")

    assert result.text == "Nothing is low on stock."
    assert memory.get_or_create(ctx.session_id).context.last_action == "Generated low_stock report"


async def test_missing_identity_is_rejected(agent):
    with pytest.raises(UnauthorizedError):
        await agent.submit_message(SessionContext(user_id=""), "hello")

# nosec B101


import asyncio
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from application.services.converter import ConverterController
from application.services.rates_repository import RatesRepository
from domain.exceptions.currency import NetworkError
from domain.models.currency import ExchangeRate, LatestRate


def latest(from_currency="USD", to_currency="EUR", rate=0.85, from_cache=False):
    return LatestRate(
        rate=ExchangeRate(
            rate=rate,
            timestamp=datetime(2024, 1, 15),
            from_currency=from_currency,
            to_currency=to_currency,
        ),
        from_cache=from_cache,
    )


@pytest.fixture
def repository():
    repo = AsyncMock(spec=RatesRepository)

    async def get_latest_rate(from_currency, to_currency):
        rates = {("USD", "EUR"): 0.85, ("EUR", "USD"): 1.18, ("GBP", "EUR"): 1.17}
        return latest(from_currency, to_currency, rates[(from_currency, to_currency)])

    repo.get_latest_rate.side_effect = get_latest_rate
    return repo


@pytest.fixture
def controller(repository, local_store):
    return ConverterController(repository, local_store)


def test_initial_state_uses_default_currency(controller):
    state = controller.state

    assert state.from_currency == "USD"
    assert state.to_currency == "EUR"
    assert state.amount == 1.0
    assert state.rate is None
    assert state.result is None


@pytest.mark.asyncio
async def test_initial_state_follows_stored_preference(repository, local_store):
    await local_store.set_default_currency("GBP")

    controller = ConverterController(repository, local_store, to_currency="JPY")

    assert controller.state.from_currency == "GBP"
    assert controller.state.to_currency == "JPY"


@pytest.mark.asyncio
async def test_load_computes_result(controller):
    controller.set_amount(100)

    await controller.load()

    state = controller.state
    assert state.rate.rate == 0.85
    assert state.result == pytest.approx(85.0)
    assert state.is_loading is False
    assert state.error is None


@pytest.mark.asyncio
async def test_set_amount_recomputes_without_fetching(controller, repository):
    await controller.load()

    controller.set_amount(250)

    assert controller.state.result == pytest.approx(212.5)
    assert repository.get_latest_rate.await_count == 1


def test_set_amount_before_any_rate_leaves_result_empty(controller):
    controller.set_amount(10)

    assert controller.state.amount == 10
    assert controller.state.result is None


@pytest.mark.asyncio
async def test_from_cache_flag_is_exposed(controller, repository):
    repository.get_latest_rate.side_effect = None
    repository.get_latest_rate.return_value = latest(from_cache=True)

    await controller.load()

    assert controller.state.from_cache is True


@pytest.mark.asyncio
async def test_failure_keeps_last_rate_and_sets_error(controller, repository):
    await controller.load()
    repository.get_latest_rate.side_effect = NetworkError()

    await controller.refresh()

    state = controller.state
    assert state.error == "Network error occurred"
    assert state.rate.rate == 0.85
    assert state.result == pytest.approx(0.85)
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_unexpected_failure_sets_error(controller, repository):
    repository.get_latest_rate.side_effect = RuntimeError("boom")

    await controller.load()

    assert controller.state.error == "boom"
    assert controller.state.is_loading is False


@pytest.mark.asyncio
async def test_dismiss_error(controller, repository):
    repository.get_latest_rate.side_effect = NetworkError()
    await controller.load()

    controller.dismiss_error()

    assert controller.state.error is None


@pytest.mark.asyncio
async def test_swap_reverses_pair_and_reloads(controller, repository):
    await controller.load()

    await controller.swap()

    state = controller.state
    assert (state.from_currency, state.to_currency) == ("EUR", "USD")
    assert state.rate.rate == 1.18
    repository.get_latest_rate.assert_awaited_with("EUR", "USD")


@pytest.mark.asyncio
async def test_set_currencies_reload(controller, repository):
    await controller.set_from_currency("GBP")

    assert controller.state.from_currency == "GBP"
    assert controller.state.rate.rate == 1.17
    repository.get_latest_rate.assert_awaited_with("GBP", "EUR")


@pytest.mark.asyncio
async def test_superseded_result_is_dropped(controller, repository):
    gate = asyncio.Event()

    async def get_latest_rate(from_currency, to_currency):
        if from_currency == "USD":
            await gate.wait()
            return latest("USD", "EUR", 0.85)
        return latest(from_currency, to_currency, 1.17)

    repository.get_latest_rate.side_effect = get_latest_rate

    slow = asyncio.create_task(controller.load())
    await asyncio.sleep(0)
    await controller.set_from_currency("GBP")
    gate.set()
    await slow

    state = controller.state
    assert state.from_currency == "GBP"
    assert state.rate.from_currency == "GBP"
    assert state.rate.rate == 1.17


# ============================================================================
# TEST: subscriptions
# ============================================================================

@pytest.mark.asyncio
async def test_subscribe_receives_every_state(controller):
    seen = []
    unsubscribe = controller.subscribe(seen.append)

    await controller.load()
    unsubscribe()
    controller.set_amount(5)

    assert seen[0].rate is None
    assert seen[1].is_loading is True
    assert seen[-1].rate.rate == 0.85
    assert all(state.amount == 1.0 for state in seen)


@pytest.mark.asyncio
async def test_updates_stream(controller):
    stream = controller.updates()

    first = await stream.__anext__()
    controller.set_amount(42)
    second = await stream.__anext__()
    await stream.aclose()

    assert first.amount == 1.0
    assert second.amount == 42


# ============================================================================
# TEST: auto-refresh
# ============================================================================

@pytest.mark.asyncio
async def test_auto_refresh_respects_preference(repository, local_store):
    await local_store.set_auto_refresh(False)
    controller = ConverterController(repository, local_store, refresh_interval=0.01)

    assert controller.start_auto_refresh() is False
    await asyncio.sleep(0.05)

    repository.get_latest_rate.assert_not_called()


@pytest.mark.asyncio
async def test_auto_refresh_reloads_until_stopped(repository, local_store):
    controller = ConverterController(repository, local_store, refresh_interval=0.01)

    assert controller.start_auto_refresh() is True
    await asyncio.sleep(0.1)
    await controller.stop_auto_refresh()
    calls = repository.get_latest_rate.await_count
    await asyncio.sleep(0.05)

    assert calls >= 1
    assert repository.get_latest_rate.await_count == calls


@pytest.mark.asyncio
async def test_close_stops_auto_refresh(repository, local_store):
    controller = ConverterController(repository, local_store, refresh_interval=0.01)
    controller.start_auto_refresh()

    await controller.close()

    assert controller._refresh_task is None

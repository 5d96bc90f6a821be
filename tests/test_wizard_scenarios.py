from __future__ import annotations

import pytest

from utils.async_collection import Page, paginate
from wizard import WIZARD_CANCELLED, Form, Wizard
from wizard.testing import HeadlessHost


@pytest.mark.asyncio
async def test_long_foo_shows_bar_and_collects_choice(host: HeadlessHost, foo_bar_form: Form) -> None:
    host.script.enter("Hello, world!").pick("2")

    result = await Wizard(foo_bar_form).run()

    assert result == {"foo": "Hello, world!", "bar": 2}
    assert host.shown_titles == ["foo", "bar"]
    assert host.shown[1].labels == ["1", "2"]
    host.script.assert_exhausted()


@pytest.mark.asyncio
async def test_short_foo_never_shows_bar(host: HeadlessHost, foo_bar_form: Form) -> None:
    host.script.enter("Hi")

    result = await Wizard(foo_bar_form).run()

    assert result == {"foo": "Hi"}
    assert "bar" not in result
    assert host.shown_titles == ["foo"]


@pytest.mark.asyncio
async def test_cancel_at_first_step_cancels_wizard(host: HeadlessHost, foo_bar_form: Form) -> None:
    host.script.back()
    wizard = Wizard(foo_bar_form)

    result = await wizard.run()

    assert result is WIZARD_CANCELLED
    assert wizard.last_result is not None
    assert wizard.last_result.state.to_dict() == {}


@pytest.mark.asyncio
async def test_back_from_bar_prefills_foo_and_reevaluates(host: HeadlessHost, foo_bar_form: Form) -> None:
    host.script.enter("Hello, world!").back().enter("Hi")

    result = await Wizard(foo_bar_form).run()

    assert result == {"foo": "Hi"}
    assert host.shown_titles == ["foo", "bar", "foo"]
    assert host.shown[0].value == ""
    assert host.shown[2].value == "Hello, world!"


@pytest.mark.asyncio
async def test_three_pages_flatten_in_order() -> None:
    pages = {None: (["a", "b"], 1), 1: (["c", "d"], 2), 2: (["e", "f"], None)}

    async def requester(token: int | None) -> Page[str]:
        items, next_token = pages[token]
        return Page(items=items, next=next_token)

    items = await paginate(requester).flatten().promise()

    assert items == ["a", "b", "c", "d", "e", "f"]

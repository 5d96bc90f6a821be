from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from wizard import DeclarationError, Form, InputConfig, StateView, Wizard
from wizard.form import model_has_path
from wizard.testing import HeadlessHost


def _noop(state: StateView) -> None:
    return None


class Address(BaseModel):
    city: str
    zip_code: str | None = None


class Profile(BaseModel):
    name: str
    address: Address | None = None
    tags: dict[str, Any] = {}


def test_fields_keep_declaration_order() -> None:
    form = Form()
    for path in ("zeta", "alpha", "mid.value"):
        form.field(path).bind_prompter(_noop)

    assert form.paths == ("zeta", "alpha", "mid.value")
    assert [field.path for field in form] == ["zeta", "alpha", "mid.value"]
    assert len(form) == 3
    assert "alpha" in form


def test_binding_same_path_twice_is_rejected() -> None:
    form = Form()
    form.field("foo").bind_prompter(_noop)

    with pytest.raises(DeclarationError, match="already bound"):
        form.field("foo").bind_prompter(_noop)


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a.", " a", "a. b"])
def test_malformed_paths_are_rejected(path: str) -> None:
    with pytest.raises(DeclarationError):
        Form().field(path)


def test_overlapping_paths_are_rejected() -> None:
    form = Form()
    form.field("company").bind_prompter(_noop)

    with pytest.raises(DeclarationError, match="overlaps"):
        form.field("company.name").bind_prompter(_noop)


def test_non_callable_binder_or_predicate_is_rejected() -> None:
    form = Form()
    with pytest.raises(DeclarationError):
        form.field("a").bind_prompter("not callable")  # type: ignore[arg-type]
    with pytest.raises(DeclarationError):
        form.field("a").bind_prompter(_noop, show_when=True)  # type: ignore[arg-type]
    assert "a" not in form


def test_forward_dependency_is_rejected() -> None:
    form = Form()
    form.field("a").bind_prompter(_noop, depends_on=("b",))

    with pytest.raises(DeclarationError, match="must be declared before"):
        form.field("b").bind_prompter(_noop)


def test_dependency_introspection() -> None:
    form = Form()
    form.field("foo").bind_prompter(_noop)
    form.field("bar").bind_prompter(_noop, depends_on=("foo",))
    form.field("baz").bind_prompter(_noop, depends_on="foo")

    assert form.dependencies_of("bar") == frozenset({"foo"})
    assert form.dependents_of("foo") == ("bar", "baz")
    assert form.dependents_of("bar") == ()


def test_set_default_requires_bound_field() -> None:
    form = Form()
    with pytest.raises(DeclarationError, match="must be bound"):
        form.field("a").set_default(1)

    form.field("a").bind_prompter(_noop)
    form.field("a").set_default(1)
    field = form.get("a")
    assert field is not None and field.has_default and field.default == 1


def test_typed_form_rejects_unknown_paths() -> None:
    form = Form(Profile)
    form.field("name").bind_prompter(_noop)
    form.field("address.city").bind_prompter(_noop)
    form.field("tags.anything").bind_prompter(_noop)

    with pytest.raises(DeclarationError, match="not a field of Profile"):
        form.field("address.street").bind_prompter(_noop)
    with pytest.raises(DeclarationError):
        form.field("age").bind_prompter(_noop)


def test_model_has_path_walks_optional_models() -> None:
    assert model_has_path(Profile, "address.zip_code")
    assert not model_has_path(Profile, "name.first")
    assert not model_has_path(Profile, "missing")


def test_form_model_must_be_pydantic() -> None:
    with pytest.raises(DeclarationError):
        Form(dict)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_form_is_frozen_once_a_wizard_runs(host: HeadlessHost) -> None:
    form = Form()
    form.field("a").bind_prompter(lambda state: host.create_input_box())
    host.script.enter("x")
    await Wizard(form).run()

    assert form.frozen
    with pytest.raises(DeclarationError, match="frozen"):
        form.field("b").bind_prompter(_noop)


@pytest.mark.asyncio
async def test_applied_form_sees_scoped_state(host: HeadlessHost) -> None:
    address = Form()
    address.field("city").bind_prompter(lambda state: host.create_input_box(InputConfig(title="city")))
    address.field("zip").bind_prompter(
        lambda state: host.create_input_box(InputConfig(title=f"zip for {state.get('city')}")),
        show_when=lambda state: state.get("city") != "Nowhere",
        depends_on=("city",),
    )

    form = Form()
    form.field("wants_address").bind_prompter(lambda state: host.create_quick_pick([True, False]))
    form.apply_form("address", address, show_when=lambda state: state.get("wants_address") is True)

    assert form.paths == ("wants_address", "address.city", "address.zip")
    assert form.dependencies_of("address.zip") == frozenset({"address.city"})

    host.script.pick("True").enter("Berlin").enter("10115")
    result = await Wizard(form).run()

    assert result == {"wants_address": True, "address": {"city": "Berlin", "zip": "10115"}}
    assert host.shown_titles[-1] == "zip for Berlin"


@pytest.mark.asyncio
async def test_applied_form_gate_hides_all_nested_fields(host: HeadlessHost) -> None:
    address = Form()
    address.field("city").bind_prompter(lambda state: host.create_input_box(InputConfig(title="city")))

    form = Form()
    form.field("wants_address").bind_prompter(lambda state: host.create_quick_pick([True, False]))
    form.apply_form("address", address, show_when=lambda state: state.get("wants_address") is True)

    host.script.pick("False")
    result = await Wizard(form).run()

    assert result == {"wants_address": False}


def test_form_cannot_be_applied_to_itself() -> None:
    form = Form()
    with pytest.raises(DeclarationError):
        form.apply_form("nested", form)

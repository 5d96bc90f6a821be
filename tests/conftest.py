from pathlib import Path
import sys

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wizard import Form, InputConfig, PickerConfig  # noqa: E402
from wizard.testing import HeadlessHost  # noqa: E402


@pytest.fixture
def host() -> HeadlessHost:
    """Scripted host shared by every prompter a test creates."""

    return HeadlessHost()


def build_foo_bar_form(host: HeadlessHost) -> Form:
    """``foo`` (text, always shown) then ``bar`` (1 or 2, shown for long ``foo``)."""

    form = Form()
    form.field("foo").bind_prompter(lambda state: host.create_input_box(InputConfig(title="foo")))
    form.field("bar").bind_prompter(
        lambda state: host.create_quick_pick([1, 2], PickerConfig(title="bar")),
        show_when=lambda state: len(state.get("foo", "")) > 5,
        depends_on=("foo",),
    )
    return form


@pytest.fixture
def foo_bar_form(host: HeadlessHost) -> Form:
    return build_foo_bar_form(host)

"""Interactive demo wizard that collects new-project settings on the terminal."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Literal

from pydantic import BaseModel

import config
from utils.async_collection import Page, paginate
from utils.logging_context import configure_logging
from wizard import WIZARD_CANCELLED, DataItem, Form, InputConfig, PickerConfig, PrompterFactory, StateView, Wizard

RUNTIME_PAGES: tuple[tuple[str, ...], ...] = (
    ("python3.13", "python3.12"),
    ("python3.11", "python3.10"),
    ("pypy3.10",),
)


class ProjectSettings(BaseModel):
    """Settings collected by the demo wizard."""

    name: str
    kind: Literal["app", "library"]
    entrypoint: str | None = None
    runtime: str
    license: str = "MIT"


async def fetch_runtimes(token: int | None) -> Page[str]:
    """Serve :data:`RUNTIME_PAGES` one page per call."""

    index = token or 0
    await asyncio.sleep(0)
    next_token = index + 1 if index + 1 < len(RUNTIME_PAGES) else None
    return Page(items=list(RUNTIME_PAGES[index]), next=next_token)


def _validate_name(text: str) -> str | None:
    if not text:
        return "A project name is required"
    if not text.replace("-", "").replace("_", "").isalnum():
        return "Use letters, digits, '-' and '_' only"
    return None


def build_form(host: PrompterFactory) -> Form[ProjectSettings]:
    """Declare the demo questions against ``host``."""

    form: Form[ProjectSettings] = Form(ProjectSettings)
    form.field("name").bind_prompter(
        lambda state: host.create_input_box(
            InputConfig(title="Project name", prompt="Name"),
            validate=_validate_name,
        )
    )
    form.field("kind").bind_prompter(
        lambda state: host.create_quick_pick(
            [
                DataItem("Application", "app", description="runnable program"),
                DataItem("Library", "library", description="importable package"),
            ],
            PickerConfig(title="Project kind"),
        )
    )

    def _entrypoint(state: StateView):
        return host.create_input_box(
            InputConfig(title="Entry point", prompt="Module", value=f"{state.get('name')}.main")
        )

    form.field("entrypoint").bind_prompter(
        _entrypoint,
        show_when=lambda state: state.get("kind") == "app",
        depends_on=("kind", "name"),
    )
    form.field("runtime").bind_prompter(
        lambda state: host.create_quick_pick(
            paginate(fetch_runtimes).flatten(),
            PickerConfig(title="Runtime"),
        )
    )
    form.field("license").bind_prompter(
        lambda state: None
        if state.get("kind") == "app"
        else host.create_quick_pick(["MIT", "Apache-2.0", "BSD-3-Clause"], PickerConfig(title="License")),
        depends_on=("kind",),
        default="MIT",
    )
    return form


def main(argv: list[str] | None = None, *, host: PrompterFactory | None = None) -> int:
    """Run the demo wizard and print the collected settings as JSON.

    Example::

        python -m cli.demo --log-level DEBUG
    """

    parser = argparse.ArgumentParser(description="Demo project setup wizard")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level name")
    parser.add_argument(
        "--no-steps",
        action="store_true",
        help="Hide the (current/total) step estimate in prompt titles",
    )
    args = parser.parse_args(argv)

    configure_logging(level=config.normalise_log_level(args.log_level))

    if host is None:
        from cli.console_host import ConsoleHost

        host = ConsoleHost()

    wizard = Wizard(build_form(host), estimate_steps=False if args.no_steps else None)
    result = asyncio.run(wizard.run())
    if result is WIZARD_CANCELLED:
        print("Cancelled.")
        return 1
    print(json.dumps(result.model_dump(), indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

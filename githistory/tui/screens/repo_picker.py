"""Repository picker modal: choose one item from a list of roots.

Returns the index of the chosen item, or None if dismissed.
"""
from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from githistory.engine.models import PickItem, PickOptions


def _matches(item: PickItem, needle: str, options: PickOptions) -> bool:
    if not needle:
        return True
    haystacks = [item.label]
    if options.match_on_detail:
        haystacks.append(item.detail)
    return any(needle in h.lower() for h in haystacks)


class RepositoryPickerScreen(ModalScreen[int | None]):
    """Modal dialog listing pick items as buttons, in the order given."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    CSS = """
    RepositoryPickerScreen {
        align: center middle;
    }
    RepositoryPickerScreen > Vertical {
        width: 80;
        height: auto;
        max-height: 32;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }
    RepositoryPickerScreen .picker-title {
        text-align: center;
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
        width: 100%;
    }
    RepositoryPickerScreen .picker-list {
        max-height: 20;
        margin: 0 0 1 0;
    }
    RepositoryPickerScreen .picker-btn {
        width: 100%;
        margin: 0;
    }
    RepositoryPickerScreen .modal-actions {
        layout: horizontal;
        height: 3;
        align: center middle;
    }
    """

    def __init__(
        self,
        items: list[PickItem],
        options: PickOptions | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._items = items
        self._options = options or PickOptions()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(
                self._options.placeholder or "Select an item",
                classes="picker-title",
            )
            yield Input(placeholder="Filter", id="picker-filter")
            with VerticalScroll(classes="picker-list"):
                for idx, item in enumerate(self._items):
                    label = Text(item.label, style="bold")
                    if item.detail:
                        label.append(f"  {item.detail}", style="dim")
                    yield Button(label, id=f"pick-{idx}", classes="picker-btn")
            with Horizontal(classes="modal-actions"):
                yield Button("Cancel", id="pick-cancel")

    def on_mount(self) -> None:
        if self._items:
            self.query_one("#pick-0", Button).focus()

    def _visible_indices(self) -> list[int]:
        return [
            idx for idx in range(len(self._items))
            if self.query_one(f"#pick-{idx}", Button).display
        ]

    def on_input_changed(self, event: Input.Changed) -> None:
        needle = event.value.strip().lower()
        for idx, item in enumerate(self._items):
            button = self.query_one(f"#pick-{idx}", Button)
            button.display = _matches(item, needle, self._options)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        visible = self._visible_indices()
        if visible:
            self.dismiss(visible[0])

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn_id = event.button.id or ""
        if btn_id == "pick-cancel":
            self.dismiss(None)
        elif btn_id.startswith("pick-"):
            self.dismiss(int(btn_id.removeprefix("pick-")))

    def action_cancel(self) -> None:
        self.dismiss(None)


class PickerApp(App[int | None]):
    """Standalone app hosting one RepositoryPickerScreen."""

    def __init__(self, items: list[PickItem], options: PickOptions) -> None:
        super().__init__()
        self._items = items
        self._options = options

    def on_mount(self) -> None:
        self.push_screen(
            RepositoryPickerScreen(self._items, self._options),
            callback=self.exit,
        )

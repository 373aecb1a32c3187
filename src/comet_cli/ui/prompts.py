"""
Interactive prompts built on click.

The :class:`Prompter` bundles every kind of question the wizard asks:
single choice, grouped multiple choice, free text and yes/no, plus the
banner and status helpers. It owns one :class:`Spinner` which callers
obtain through :meth:`Prompter.spinner` and pass on explicitly.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import click

from comet_cli.grouping.file_groups import FileOption


@dataclass(frozen=True)
class Option:
    """A choice of a single-select prompt."""

    value: str
    label: str
    hint: str = ""


class Spinner:
    """Single-line status indicator with a live-updating message."""

    FRAMES = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']

    def __init__(self) -> None:
        self.frame_index = 0
        self.start_time: Optional[float] = None
        self.text = ""

    @property
    def active(self) -> bool:
        return self.start_time is not None

    def _render(self) -> str:
        # Streamed text may span lines; the status line must not
        line = " ".join(self.text.split())
        return f"\r{self.FRAMES[self.frame_index]} {line}"

    def start(self, message: str) -> None:
        self.start_time = time.time()
        self.frame_index = 0
        self.text = message
        click.echo(self._render(), nl=False)

    def message(self, text: str) -> None:
        """Replace the status text and advance the spinner frame."""
        self.frame_index = (self.frame_index + 1) % len(self.FRAMES)
        self.text = text
        if self.active:
            click.echo(self._render(), nl=False)

    def stop(self, message: Optional[str] = None, ok: bool = True) -> None:
        if not self.active:
            return
        elapsed = time.time() - self.start_time
        mark = "✓" if ok else "✗"
        click.echo(f"\r{mark} {message or self.text} (took {elapsed:.1f}s)")
        self.start_time = None


def parse_selection(raw: str, groups: Mapping[str, Sequence[FileOption]]) -> List[str]:
    """Translate an answer of the grouped multi-select into paths.

    Options are numbered from 1 across all groups in display order. The
    answer is a comma or space separated list of option numbers, ranges
    such as ``2-4``, group keys (every option of that group) or ``all``.

    Raises
    ------
    ValueError
        If a token names no option.
    """
    options = [option for members in groups.values() for option in members]
    group_indices = {}
    index = 0
    for key, members in groups.items():
        group_indices[key] = range(index, index + len(members))
        index += len(members)

    chosen = set()
    for token in raw.replace(",", " ").split():
        if token in group_indices:
            chosen.update(group_indices[token])
        elif token.lower() == "all":
            chosen.update(range(len(options)))
        else:
            low, sep, high = token.partition("-")
            if not low.isdigit() or (sep and not high.isdigit()):
                raise ValueError(f"Unknown selection: {token}")
            first = int(low)
            last = int(high) if sep else first
            if first < 1 or last > len(options) or first > last:
                raise ValueError(f"Selection out of range: {token}")
            chosen.update(range(first - 1, last))
    return [options[i].value for i in sorted(chosen)]


class Prompter:
    """Question and status helpers for one interactive session."""

    def __init__(self) -> None:
        self._spinner = Spinner()

    def spinner(self) -> Spinner:
        return self._spinner

    # ------------------------------------------------------------------
    # Banners and status lines
    # ------------------------------------------------------------------
    def intro(self, title: str) -> None:
        click.echo("")
        click.echo(click.style(f" {title} ", fg="white", bg="blue"))
        click.echo("")

    def outro(self, message: str) -> None:
        click.echo(f"\n{message}\n")

    def info(self, message: str) -> None:
        click.echo(f"ℹ {message}")

    def warning(self, message: str) -> None:
        click.echo(f"⚠ {message}")

    def error(self, message: str) -> None:
        click.echo(f"✗ {message}", err=True)

    def note(self, title: str, body: str) -> None:
        """Show ``body`` in a box headed by ``title``."""
        lines = body.splitlines() or [""]
        width = min(max(len(title), max(len(line) for line in lines)) + 2, 76)
        click.echo(f"\n┌{'─' * width}┐")
        click.echo(f"│ {title.ljust(width - 1)}│")
        click.echo(f"├{'─' * width}┤")
        for line in lines:
            click.echo(f"│ {line.ljust(width - 1)}│")
        click.echo(f"└{'─' * width}┘")

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def select(self, message: str, options: Sequence[Option], default: Optional[str] = None) -> str:
        """Ask for exactly one of ``options`` and return its value."""
        values = [option.value for option in options]
        default_index = values.index(default) if default in values else 0

        click.echo(f"\n? {message}")
        for number, option in enumerate(options, start=1):
            marker = "●" if number - 1 == default_index else "○"
            hint = click.style(f"  ({option.hint})", dim=True) if option.hint else ""
            click.echo(f"  {marker} {number}) {option.label}{hint}")

        number = click.prompt(
            "  Choose",
            type=click.IntRange(1, len(options)),
            default=default_index + 1,
            show_default=True,
        )
        return options[number - 1].value

    def group_multiselect(
        self,
        message: str,
        groups: Mapping[str, Sequence[FileOption]],
        required: bool = True,
    ) -> List[str]:
        """Ask for any number of grouped options and return their values."""
        click.echo(f"\n? {message}")
        number = 0
        for key, members in groups.items():
            click.echo(click.style(f"  {key}", bold=True))
            for option in members:
                number += 1
                click.echo(f"    {number}) {option.label}")

        while True:
            raw = click.prompt(
                "  Select (numbers, ranges, group names or 'all')",
                default="",
                show_default=False,
            )
            try:
                selection = parse_selection(raw, groups)
            except ValueError as exc:
                self.warning(str(exc))
                continue
            if required and not selection:
                self.warning("Please select at least one option.")
                continue
            return selection

    def text(self, message: str, initial_value: Optional[str] = None) -> str:
        """Ask for a non-empty line of text, offering ``initial_value`` as default."""
        while True:
            value = click.prompt(
                f"\n? {message}",
                default=initial_value,
                show_default=initial_value is not None,
            ).strip()
            if value:
                return value
            self.warning("A value is required.")

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(f"\n? {message}", default=default)

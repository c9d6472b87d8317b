from __future__ import annotations

from collections.abc import Callable, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import Item, Participant, SessionHistoryEntry
from ..core.summary import SessionSummary


class RichPresenter:
    def __init__(
        self,
        *,
        no_color: bool = False,
        console: Console | None = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(color_system="auto")
        self._input = input_fn

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def choose(self, prompt: str, choices: Sequence[str]) -> str:
        allowed = {choice.lower() for choice in choices}
        while True:
            raw = self.ask(f"{prompt} [{'/'.join(choices)}]: ").lower()
            if raw in allowed:
                return raw
            self.console.print(f"[red]Invalid input[/]. Choose one of {', '.join(choices)}.")

    def show_notice(self, message: str | None) -> None:
        if message:
            self.console.print(f"[yellow]{message}[/]")

    def show_roster(self, participants: Sequence[Participant]) -> None:
        names = ", ".join(p.name for p in participants) or "nobody yet"
        self.console.print(f"[bold]Group:[/] {names}")

    def start_turn(self, participant: Participant, number: int, total: int) -> None:
        self.console.print()
        self.console.print(
            Panel(
                f"Now rating: [bold]{participant.name}[/]\nPerson {number} of {total}",
                title="Pass the device",
                border_style="bold cyan",
                expand=False,
            )
        )

    def show_item(self, item: Item, position: int, total: int) -> None:
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Title", f"[bold]{item.title}[/]" + (f" ({item.year})" if item.year else ""))
        info.add_row("Genre", item.category)
        info.add_row("Length", f"{item.duration_minutes} min")
        info.add_row("Rating", f"{item.rating:.1f}")
        if item.description:
            info.add_row("About", item.description)
        self.console.rule(f"{position}/{total}")
        self.console.print(info)

    def show_match(self, item: Item) -> None:
        self.console.print()
        self.console.print(
            Panel(f"It's a match!\n[bold green]{item.title}[/]", title="Match", border_style="green", expand=False)
        )

    def show_summary(self, summary: SessionSummary) -> None:
        title = "Session Complete" if summary.matched_item else "No Match Found"
        table = Table(title=title, show_header=False, min_width=40)
        if summary.matched_item:
            table.add_row("Match:", summary.matched_item.title)
        table.add_row("Ratings:", str(summary.total_ratings))
        table.add_row("Approvals:", str(summary.approvals))
        table.add_row("Rejections:", str(summary.rejections))
        self.console.print(table)

        people = Table(title="By person", show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        people.add_column("Name")
        people.add_column("Rated", justify="right")
        people.add_column("Liked", justify="right")
        people.add_column("Liked %", justify="right")
        for stats in summary.participants:
            people.add_row(stats.name, str(stats.total), str(stats.approvals), f"{stats.approval_pct:.0f}%")
        self.console.print(people)

        if summary.top_items:
            top = Table(title="Most liked", show_header=True, header_style="bold blue")
            top.add_column("#")
            top.add_column("Title")
            top.add_column("Likes", justify="right")
            for rank, (item, count) in enumerate(summary.top_items, 1):
                top.add_row(str(rank), item.title, str(count))
            self.console.print(top)

    def show_pool(self, items: Sequence[Item]) -> None:
        table = Table(show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Id")
        table.add_column("Title", style="bold")
        table.add_column("Genre")
        for index, item in enumerate(items, 1):
            table.add_row(str(index), item.id, item.title, item.category)
        self.console.print(table)

    def show_history(self, entries: Sequence[SessionHistoryEntry]) -> None:
        if not entries:
            self.console.print("No sessions recorded yet.")
            return
        table = Table(title="Recent sessions", show_header=True, header_style="bold blue")
        table.add_column("When")
        table.add_column("Session")
        table.add_column("Titles shown", justify="right")
        for entry in entries:
            table.add_row(
                entry.created_at.strftime("%Y-%m-%d %H:%M"),
                entry.session_id,
                str(len(entry.shown_item_ids)),
            )
        self.console.print(table)

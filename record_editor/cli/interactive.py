"""Interactive terminal editor for a record collection."""
from typing import List, Optional

import click
from colorama import Fore, Style

from config import app_config
from record_editor.api.record_client import RecordClient
from record_editor.exceptions import TransportError
from record_editor.introspection.rule_inferencer import RuleCache, WidgetType
from record_editor.schema.models import DetailField
from record_editor.sync.view_synchronizer import EditorEvent, ViewSynchronizer


class InteractiveCLI:
    """Draws the list/detail projections and turns keystrokes into editor events."""

    COMMANDS = [
        ("<n>", "select row n (again to deselect)"),
        ("e <key>", "edit a field of the selected record"),
        ("n", "new record"),
        ("w", "save"),
        ("r", "reset"),
        ("d", "delete"),
        ("c", "close detail"),
        ("o <collection>", "open another collection"),
        ("q", "quit"),
    ]

    def __init__(self, client: Optional[RecordClient] = None, rule_cache: Optional[RuleCache] = None):
        """Initialize CLI."""
        self.client = client or RecordClient(app_config.api)
        self.sync = ViewSynchronizer(
            self.client,
            rule_cache=rule_cache,
            warn_on_blur=app_config.options.warn_on_blur,
        )

    def print_header(self, title: str):
        """Print a section header."""
        print(f"\n{Fore.CYAN}{'━' * 45}")
        print(f"{Fore.CYAN}{title}")
        print(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}\n")

    def show_banner(self):
        """Print the API banner message."""
        try:
            message = self.client.fetch_banner()
        except TransportError as e:
            if e.status_code is not None:
                message = f"Server responded with code {e.status_code}"
            else:
                message = "Network error: Could not load banner"
            click.echo(f"{Fore.YELLOW}⚠️  {message}")
            return
        click.echo(f"{Fore.WHITE}ℹ️  {message}")

    def open(self, collection: str) -> bool:
        """Load a collection and draw it."""
        ok = self.sync.dispatch(EditorEvent("open", {"collection": collection}))
        self.render()
        return bool(ok)

    def render(self):
        """Draw page heading, list and detail form."""
        self.print_header(self.sync.title or self.sync.collection or "Records")

        if self.sync.description:
            click.echo(self.sync.description)
        if self.sync.notice:
            click.echo(f"{Fore.YELLOW}⚠️  {self.sync.notice}")

        self.render_list()
        self.render_detail()

    def render_list(self):
        """Draw the list projection."""
        columns = self.sync.columns
        if not columns:
            click.echo(f"{Fore.YELLOW}No records")
            return

        click.echo("     " + " | ".join(f"{c.label:15.15s}" for c in columns))
        for i, row in enumerate(self.sync.rows(), 1):
            marker = f"{Fore.GREEN}▶" if row.selected else " "
            cells = " | ".join(f"{value:15.15s}" for value in row.values)
            click.echo(f"{marker}{i:3d} {cells}{Style.RESET_ALL}")

    def render_detail(self):
        """Draw the detail projection of the selected record."""
        fields = self.sync.detail()
        if not fields:
            return

        self.print_header("Detail")
        for f in fields:
            click.echo(self._format_field(f))

        status = self.sync.status()
        if status:
            click.echo(f"\n{Fore.YELLOW}{status}")
        if self.sync.saved_message:
            click.echo(f"{Fore.GREEN}✅ {self.sync.saved_message}")

    @staticmethod
    def _format_field(f: DetailField) -> str:
        flags = []
        if f.read_only:
            flags.append("read-only")
        if f.required:
            flags.append("required")
        if f.widget == WidgetType.SELECT:
            flags.append("one of: " + ", ".join(f.options))

        color = Fore.WHITE if not f.read_only else Fore.LIGHTBLACK_EX
        suffix = f" {Fore.LIGHTBLACK_EX}({'; '.join(flags)})" if flags else ""
        return f"{color}{f.label:>20s}: {f.display_value}{suffix}{Style.RESET_ALL}"

    def prompt_value(self, f: DetailField) -> str:
        """Ask for a new value using the field's widget kind."""
        if f.widget == WidgetType.TOGGLE:
            return "true" if click.confirm(f.label, default=f.value == "true") else "false"
        if f.widget == WidgetType.SELECT:
            return click.prompt(f.label, type=click.Choice(f.options, case_sensitive=False), default=f.value if f.value in f.options else None)
        if f.widget == WidgetType.TEXTAREA:
            edited = click.edit(f.value)
            return f.value if edited is None else edited.rstrip("\n")
        return click.prompt(f.label, default=f.value, show_default=bool(f.value))

    def run(self, collection: str):
        """Run the editing loop on a collection."""
        if app_config.options.show_banner:
            self.show_banner()

        self.open(collection)

        while True:
            choice = click.prompt("Command (? for help)", default="q", show_default=False).strip()
            if not choice:
                continue

            if choice == "q":
                if self.sync.has_unsaved_changes() and not click.confirm(
                    "Discard unsaved changes?", default=False
                ):
                    continue
                click.echo(f"{Fore.YELLOW}Goodbye!")
                break

            if choice == "?":
                for command, description in self.COMMANDS:
                    click.echo(f"  {command:16s} {description}")
                continue

            self.handle(choice)
            self.render()

    def handle(self, choice: str):
        """Translate one command line into editor events."""
        command, _, argument = choice.partition(" ")
        argument = argument.strip()

        if command.isdigit():
            self._toggle_row(int(command))
        elif command == "e":
            self._edit(argument)
        elif command == "n":
            self.sync.dispatch(EditorEvent("create"))
        elif command == "w":
            self.sync.dispatch(EditorEvent("save"))
        elif command == "r":
            if not self.sync.can_reset():
                click.echo(f"{Fore.YELLOW}{self.sync.NOTHING_TO_SAVE}")
                return
            self.sync.dispatch(EditorEvent("reset"))
        elif command == "d":
            self.sync.dispatch(EditorEvent("delete"))
        elif command == "c":
            self.sync.dispatch(EditorEvent("close"))
        elif command == "o" and argument:
            self.sync.dispatch(EditorEvent("open", {"collection": argument}))
        else:
            click.echo(f"{Fore.RED}Invalid choice")

    def _toggle_row(self, number: int):
        rows = self.sync.rows()
        if not 1 <= number <= len(rows):
            click.echo(f"{Fore.RED}Invalid row number")
            return
        row = rows[number - 1]
        self.sync.dispatch(EditorEvent("toggle_row", {"handle": row.handle, "checked": not row.selected}))

    def _edit(self, key: str):
        fields: List[DetailField] = [f for f in self.sync.detail() if not f.read_only]
        if not fields:
            click.echo(f"{Fore.YELLOW}Nothing selected")
            return

        if not key:
            key = click.prompt("Field", type=click.Choice([f.key for f in fields]))

        target = next((f for f in fields if f.key == key), None)
        if target is None:
            click.echo(f"{Fore.RED}'{key}' is not an editable field")
            return

        self.sync.dispatch(EditorEvent("edit", {"key": key, "value": self.prompt_value(target)}))

# cli.py - interactive inventory console
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from app.config import get_settings
from sdk.inventory import InventoryClient

console = Console()
c = InventoryClient(base_url=get_settings().api_base_url)


# Global state for status messages and caching
status_message = "Ready"
category_cache: List[Dict[str, Any]] = []
item_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def _category_names(categories: List[Dict[str, Any]]) -> str:
    return ", ".join(cat.get("name", "?") for cat in categories) or "-"


def show_categories(categories: List[Dict[str, Any]]):
    if not categories:
        console.print("[italic yellow]No categories found[/italic yellow]")
        return

    table = Table(
        title="🏷️ Categories",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=34)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Description", width=40)

    for cat in categories:
        table.add_row(cat.get("id", "N/A"), cat.get("name", "N/A"), cat.get("description") or "")
    console.print(table)


def show_items(items: List[Dict[str, Any]], title: str = "📦 Items"):
    if not items:
        console.print("[italic yellow]No items found[/italic yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, header_style="bold cyan", title_style="bold magenta", show_lines=True)
    table.add_column("ID", style="dim", width=34)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Description", width=30)
    table.add_column("Categories", width=24)

    for it in items:
        table.add_row(
            it.get("id", "N/A"),
            it.get("name", "N/A"),
            it.get("description") or "",
            _category_names(it.get("category", []))
        )
    console.print(table)


def show_item(item: Dict[str, Any]):
    body = (
        f"[bold]{item.get('name')}[/bold]\n"
        f"{item.get('description') or ''}\n\n"
        f"💰 Price: [green]${item.get('price', 0):.2f}[/green]\n"
        f"📦 Stock: {item.get('stock', 0)}\n"
        f"🏷️ Categories: {_category_names(item.get('category', []))}"
    )
    console.print(Panel.fit(body, title=f"Item {item.get('id')}", border_style="cyan"))


def show_errors(errors: List[Dict[str, Any]]):
    table = Table(title="❌ Form errors", box=box.ROUNDED, header_style="bold red")
    table.add_column("Field", width=14)
    table.add_column("Message", width=40)
    for err in errors:
        table.add_row(err.get("path", "?"), err.get("msg", ""))
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after reporting the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(f"Error: {e}", False))
        return None


def report_submit(resp: Optional[Dict[str, Any]], what: str) -> bool:
    """Show the outcome of a form submit; True when the server redirected."""
    global status_message
    if resp is None:
        return False
    if "redirect" in resp:
        status_message = f"{what} done"
        return True
    if resp.get("errors"):
        status_message = f"Error: {what} rejected"
        show_errors(resp["errors"])
    elif resp.get("template") == "category_delete":
        status_message = "Error: category still has items"
        show_items(resp.get("category_items", []), title="Items still in this category")
    return False


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_caches():
    global category_cache, item_cache
    category_cache = try_api(c.list_categories) or []
    item_cache = try_api(c.list_items) or []


def get_category_completer():
    return WordCompleter([cat["id"] for cat in category_cache], ignore_case=True)


def get_item_completer():
    return WordCompleter([it["id"] for it in item_cache], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_categories() -> List[str]:
    show_categories(category_cache)
    raw = prompt_with_autocomplete("🏷️ Category ids (space separated)", completer=get_category_completer())
    return raw.split()


def ask_item_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": prompt_with_autocomplete("Item name", default=current.get("name", "")),
        "description": prompt_with_autocomplete("Description", default=current.get("description") or ""),
        "price": ask_float("💰 Price", default=current.get("price", 10.0)),
        "stock": IntPrompt.ask("📦 Stock", default=current.get("stock", 1)),
        "category": ask_categories(),
    }


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Inventory",
        "[bold blue]Inventory CLI with Autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_caches()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📊 Summary", "6", "📦 List items"),
            ("2", "🏷️ List categories", "7", "ℹ️ Item details"),
            ("3", "🔍 Category details", "8", "➕ Create item"),
            ("4", "➕ Create category", "9", "✏️ Update item"),
            ("5", "🗑️ Delete category", "10", "🗑️ Delete item"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 11)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            resp = try_api(c.summary, success_msg="Summary loaded")
            if resp:
                console.print(Panel.fit(
                    f"📦 Items: [bold]{resp['item_count']}[/bold]\n"
                    f"🏷️ Categories: [bold]{resp['category_count']}[/bold]",
                    title=resp.get("title", "Inventory")
                ))

        elif choice == "2":
            categories = try_api(c.list_categories, success_msg="Categories loaded")
            if categories is not None:
                show_categories(categories)

        elif choice == "3":
            cid = prompt_with_autocomplete("Enter category ID", completer=get_category_completer())
            resp = try_api(c.get_category, cid, success_msg=f"Category {cid} loaded")
            if resp:
                show_categories([resp["category"]])
                show_items(resp["category_items"], title="Items in this category")

        elif choice == "4":
            name = prompt_with_autocomplete("Category name")
            description = prompt_with_autocomplete("Description")
            resp = try_api(c.create_category, name, description)
            if report_submit(resp, f"Category '{name}' created"):
                refresh_caches()

        elif choice == "5":
            cid = prompt_with_autocomplete("Enter category ID", completer=get_category_completer())
            if Confirm.ask(f"[red]Delete category {cid}?[/red]"):
                resp = try_api(c.delete_category, cid)
                if report_submit(resp, f"Category {cid} deleted"):
                    refresh_caches()

        elif choice == "6":
            items = try_api(c.list_items, success_msg="Items loaded")
            if items is not None:
                show_items(items)

        elif choice == "7":
            iid = prompt_with_autocomplete("Enter item ID", completer=get_item_completer())
            item = try_api(c.get_item, iid, success_msg=f"Item {iid} loaded")
            if item:
                show_item(item)

        elif choice == "8":
            fields = ask_item_fields()
            resp = try_api(c.create_item, **fields)
            if report_submit(resp, f"Item '{fields['name']}' created"):
                refresh_caches()

        elif choice == "9":
            iid = prompt_with_autocomplete("Enter item ID", completer=get_item_completer())
            item = try_api(c.get_item, iid)
            if item:
                fields = ask_item_fields(item)
                resp = try_api(c.update_item, iid, **fields)
                if report_submit(resp, f"Item {iid} updated"):
                    refresh_caches()

        elif choice == "10":
            iid = prompt_with_autocomplete("Enter item ID", completer=get_item_completer())
            if Confirm.ask(f"[red]Delete item {iid}?[/red]"):
                resp = try_api(c.delete_item, iid)
                if report_submit(resp, f"Item {iid} deleted"):
                    refresh_caches()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)

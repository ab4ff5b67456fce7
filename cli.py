# cli.py - owner dashboard in the terminal
import asyncio
import base64
import mimetypes
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from storefront.logger import setup_logger
from storefront_client.catalog import ProductCatalog
from storefront_client.client import AsyncStoreClient, record_id
from storefront_client.config import ClientSettings
from storefront_client.dashboard import DashboardState, ORDER_STATUSES, PRODUCT_CATEGORIES

console = Console()
_session: Optional[PromptSession] = None

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

STATUS_STYLES = {
    "pending": "yellow",
    "processing": "cyan",
    "completed": "green",
    "cancelled": "red",
}


def toast(title: str, description: str, destructive: bool = False):
    style = "red" if destructive else "green"
    console.print(Panel.fit(f"[{style}]{description}[/{style}]", title=title, border_style=style))


def rupees(amount: Any) -> str:
    return f"₹{float(amount or 0):,.2f}"


# ---------------------------
# Display helpers
# ---------------------------
def show_stats(state: DashboardState):
    s = state.stats
    grid = Table.grid(expand=True, padding=(0, 2))
    for _ in range(4):
        grid.add_column(justify="center")
    grid.add_row(
        Panel(f"[bold]{s.total_orders}[/bold]\n[dim]Live in last updates[/dim]", title="🛒 Total Orders"),
        Panel(f"[bold]{s.total_products}[/bold]\n[dim]In catalog[/dim]", title="📦 Products"),
        Panel(f"[bold]{s.total_customers}[/bold]\n[dim]Unique emails[/dim]", title="👥 Customers"),
        Panel(f"[bold]{rupees(s.revenue)}[/bold]\n[dim]All-time (loaded)[/dim]", title="📈 Revenue"),
    )
    console.print(grid)


def show_products(products: List[Dict[str, Any]], editing: Optional[str] = None):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Inventory",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Category", width=10)
    table.add_column("Price", justify="right", width=12)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Featured", justify="center", width=8)

    for p in products:
        pid = record_id(p) or "N/A"
        stock = str(p.get("stock", 0))
        if editing and pid == editing:
            stock = f"[reverse]{stock}[/reverse]"
        table.add_row(
            pid[:12],
            p.get("name", "N/A"),
            p.get("category", "N/A"),
            rupees(p.get("price")),
            stock,
            "★" if p.get("isFeatured") else "",
        )
    console.print(table)


def show_orders(orders: List[Dict[str, Any]]):
    if not orders:
        console.print("[italic yellow]No orders yet[/italic yellow]")
        return

    table = Table(
        title="📋 Recent Orders",
        box=box.ROUNDED,
        header_style="bold yellow",
        title_style="bold yellow",
        show_lines=True
    )
    table.add_column("Order ID", style="dim", width=14)
    table.add_column("Customer", width=20)
    table.add_column("Email", width=24)
    table.add_column("Status", width=12)
    table.add_column("Total", justify="right", width=12)
    table.add_column("Items", justify="right", width=6)

    for o in orders:
        status = o.get("status", "N/A")
        style = STATUS_STYLES.get(status, "white")
        table.add_row(
            (record_id(o) or "N/A")[:12],
            o.get("name", ""),
            o.get("email", ""),
            f"[{style}]{status}[/{style}]",
            rupees(o.get("total")),
            str(sum(int(it.get("quantity", 1)) for it in o.get("items", []))),
        )
    console.print(table)


def show_order_details(order: Dict[str, Any]):
    title = Text()
    title.append("🧾 Order ", style="bold")
    title.append(record_id(order) or "N/A", style="bold cyan")

    lines = [
        f"[bold]Customer:[/bold] {order.get('name', '')}",
        f"[bold]Email:[/bold] {order.get('email', '')}",
        f"[bold]Phone:[/bold] {order.get('phone', '')}",
        f"[bold]Address:[/bold] {order.get('address') or '-'}",
        f"[bold]Payment:[/bold] {order.get('paymentMethod', '')}",
        f"[bold]Placed:[/bold] {order.get('createdAt', '')}",
        f"[bold]Status:[/bold] {order.get('status', '')}",
    ]
    items = Table(box=box.SIMPLE, header_style="bold blue")
    items.add_column("Item", width=24)
    items.add_column("Qty", justify="right", width=6)
    items.add_column("Price", justify="right", width=12)
    items.add_column("Subtotal", justify="right", width=12)
    for it in order.get("items", []):
        qty = int(it.get("quantity", 0))
        price = float(it.get("price", 0))
        items.add_row(it.get("name", "?"), str(qty), rupees(price), rupees(price * qty))

    console.print(Panel("\n".join(lines), title=title, border_style="blue"))
    console.print(items)
    console.print(f"[bold green]Total: {rupees(order.get('total'))}[/bold green]")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🍬 Storefront",
        "[bold blue]Owner Dashboard[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
async def ask(message: str, completer=None, default: str = "") -> str:
    global _session
    if _session is None:
        _session = PromptSession()
    return (await _session.prompt_async(f"{message} ", completer=completer, style=custom_style, default=default)).strip()


YES_NO = WordCompleter(["y", "yes", "n", "no"], ignore_case=True)


async def ask_yes_no(message: str, default: bool = False) -> bool:
    hint = "Y/n" if default else "y/N"
    answer = (await ask(f"{message} [{hint}]", completer=YES_NO)).lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def product_completer(state: DashboardState):
    return WordCompleter([record_id(p) for p in state.products if record_id(p)], ignore_case=True)


def order_completer(state: DashboardState):
    return WordCompleter([record_id(o) for o in state.orders if record_id(o)], ignore_case=True)


# ---------------------------
# Actions
# ---------------------------
async def add_product_flow(state: DashboardState):
    form = {
        "name": await ask("Product name"),
        "price": await ask("💰 Price (₹)"),
        "description": await ask("Description"),
        "category": await ask("🏷️ Category", completer=WordCompleter(list(PRODUCT_CATEGORIES))),
        "stock": await ask("📦 Stock", default="0"),
        "isFeatured": await ask_yes_no("Feature on the storefront?"),
        "image": "",
    }
    image_path = await ask("Image file (optional)")
    if image_path:
        form["image"] = encode_image(image_path)
    created = await state.add_product(form)
    if created:
        show_products([created])


def encode_image(path: str) -> str:
    mime = mimetypes.guess_type(path)[0] or "application/octet-stream"
    try:
        with open(path, "rb") as f:
            data = base64.b64encode(f.read()).decode("ascii")
    except OSError as e:
        toast("Image skipped", str(e), True)
        return ""
    return f"data:{mime};base64,{data}"


async def edit_stock_flow(state: DashboardState):
    pid = await ask("Product ID", completer=product_completer(state))
    state.begin_stock_edit(pid)
    show_products(state.products, editing=state.editing_stock)
    raw = await ask("New stock (blank to cancel)")
    if not raw:
        state.cancel_stock_edit()
        return
    try:
        found = state.commit_stock_edit(pid, raw)
    except ValueError as e:
        toast("Stock not changed", str(e), True)
        return
    if found:
        toast("Stock updated", "Saved locally; not sent to the server.")
    else:
        toast("Stock not changed", f"No product with id {pid}", True)


async def change_status_flow(state: DashboardState):
    oid = await ask("Order ID", completer=order_completer(state))
    status = await ask("New status", completer=WordCompleter(list(ORDER_STATUSES)))
    try:
        found = state.change_order_status_local(oid, status)
    except ValueError as e:
        toast("Status not changed", str(e), True)
        return
    if found:
        toast("Status changed", "Local only; the next refresh shows the server's status.")
    else:
        toast("Status not changed", f"No order with id {oid}", True)


async def catalog_flow(client: AsyncStoreClient):
    catalog = ProductCatalog(client)
    await catalog.load()
    featured = catalog.featured()
    console.print(Panel.fit(f"{len(catalog.products)} products, {len(featured)} featured", title="🛍️ Storefront"))
    show_products(featured or catalog.products)


# ---------------------------
# Main menu
# ---------------------------
async def menu():
    cfg = ClientSettings.from_env()
    client = AsyncStoreClient(base_url=cfg.api_url, timeout=cfg.request_timeout)
    state = DashboardState(client, notify=toast, poll_interval=cfg.poll_interval)

    console.clear()
    console.print(create_header())
    await state.activate()

    try:
        while True:
            show_stats(state)

            menu_table = Table.grid(padding=(0, 2))
            menu_table.add_column("Key", style="bold cyan", width=4)
            menu_table.add_column("Option", width=30)
            menu_table.add_column("Key", style="bold cyan", width=4)
            menu_table.add_column("Option", width=30)

            options = [
                ("1", "📦 Inventory", "5", "✏️ Edit stock"),
                ("2", "📋 Recent orders", "6", "🔁 Change order status"),
                ("3", "🧾 Order details", "7", "🔄 Refresh now"),
                ("4", "➕ Add product", "8", "🛍️ Storefront view"),
                ("", "", "q", "👋 Quit"),
            ]
            for row in options:
                menu_table.add_row(*row)
            console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

            choice = await ask(
                "\nChoose an option",
                completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
            )

            if choice == "1":
                show_products(state.products)
            elif choice == "2":
                show_orders(state.orders)
            elif choice == "3":
                oid = await ask("Order ID", completer=order_completer(state))
                order = state.select_order(oid)
                if order:
                    show_order_details(order)
                else:
                    toast("Not found", f"No order with id {oid}", True)
            elif choice == "4":
                await add_product_flow(state)
            elif choice == "5":
                await edit_stock_flow(state)
            elif choice == "6":
                await change_status_flow(state)
            elif choice == "7":
                await asyncio.gather(state.fetch_products(), state.fetch_orders())
            elif choice == "8":
                await catalog_flow(client)
            elif choice.lower() in ("q", "quit", "exit"):
                if await ask_yes_no("Are you sure you want to quit?"):
                    console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Owner Dashboard"))
                    return

            console.print()
            console.rule(style="dim")
    finally:
        state.deactivate()
        await client.aclose()


def main():
    setup_logger("storefront_client", level="WARNING")
    try:
        asyncio.run(menu())
    except (KeyboardInterrupt, EOFError):
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()

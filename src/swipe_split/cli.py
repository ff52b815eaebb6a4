"""CLI for SwipeSplit using Typer."""

import logging
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import load_settings
from .db import Database
from .decisions import DecisionStore
from .models import SettlementResult, ShareSummary, Transaction
from .parser import compute_statement_key, load_csv_records, parse_transactions
from .session import SplitSession, Stage
from .settlement import RATIO_STEP
from .ui import (
    QUIT,
    RATIO_DOWN,
    RATIO_UP,
    UNDO,
    action_to_signal,
    confirm_start,
    read_action,
)

app = typer.Typer(
    name="swipe-split",
    help="Split shared expenses with your partner from a bank statement",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_currency(amount: Decimal, symbol: str) -> str:
    """Plain currency string: R1,234.50 or -R15.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_money(amount: Decimal, symbol: str, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: (R85.02)
    Positive amounts have spaces:      R85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"({symbol}[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"({symbol}{abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]{symbol}{abs_amount:,.2f}[/green] "
        else:
            formatted = f" {symbol}{abs_amount:,.2f} "
    return formatted


def format_date(value: datetime | None) -> str:
    """Display date like 15 Jan 2024; missing dates render as a dash."""
    if value is None:
        return "—"
    return f"{value.day} {value:%b %Y}"


def format_ratio(ratio: Decimal) -> str:
    """70/30 style label for a ratio."""
    mine = int(ratio * 100)
    return f"{mine}/{100 - mine}"


def format_share_text(summary: ShareSummary, symbol: str) -> str:
    """Build the shareable report text."""
    return (
        "Expense Split\n"
        f"Period: {format_date(summary.period_start)} – {format_date(summary.period_end)}\n"
        f"Partner owes: {format_currency(summary.partner_owes, symbol)}\n"
    )


def _open_session(
    file: Path,
    db: Database,
    ratio: float | None,
    fresh: bool,
    day_first: bool,
    default_ratio: float,
) -> tuple[SplitSession, bool]:
    """
    Parse a statement and build a session wired to the database.

    Returns:
        Tuple of (session in the confirm stage, whether decisions were restored)
    """
    transactions = parse_transactions(load_csv_records(file), day_first=day_first)
    statement_key = compute_statement_key(transactions)

    # Explicit option wins, then the last used ratio, then settings
    if ratio is None:
        saved_ratio = db.get_ratio()
        session_ratio: float | Decimal = (
            saved_ratio if saved_ratio is not None else default_ratio
        )
    else:
        session_ratio = ratio

    store = DecisionStore(
        on_change=lambda snapshot: db.save_decisions(statement_key, snapshot)
    )
    session = SplitSession(ratio=session_ratio, store=store)

    restored = False
    if fresh:
        db.delete_decisions(statement_key)
    else:
        saved = db.get_decisions(statement_key)
        if saved:
            session.restore_decisions(saved)
            restored = True

    session.load(transactions)
    return session, restored


def display_card(session: SplitSession, symbol: str):
    """Show the transaction awaiting a decision with progress."""
    txn = session.current
    if txn is None:
        return

    direction = "[green]credit[/green]" if txn.is_credit else "debit"
    body = (
        f"[bold]{format_currency(txn.amount, symbol)}[/bold]  ({direction})\n"
        f"{escape(txn.description) or '[dim]No description[/dim]'}\n"
        f"[dim]{format_date(txn.date)}[/dim]"
    )
    console.print()
    console.print(
        Panel(
            body,
            title=f"{session.cursor + 1} of {session.total}",
            subtitle=f"{session.progress:.0%} · ratio {format_ratio(session.ratio)}",
            width=60,
        )
    )


def _bucket_table(title: str, transactions: list[Transaction], symbol: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Date", style="dim", width=12)
    table.add_column("Description", style="cyan", width=40)
    table.add_column("Amount", justify="right", width=14)

    for txn in transactions:
        desc = escape(txn.description)
        table.add_row(
            format_date(txn.date),
            desc[:40] + "..." if len(desc) > 40 else desc,
            format_money(txn.amount, symbol),
        )
    return table


def display_summary(result: SettlementResult, symbol: str, decided: int, total: int):
    """Display the settlement in table format."""
    console.print()
    console.print(
        Panel(
            f"[bold]{format_currency(result.partner_owes, symbol)}[/bold]\nPartner owes you",
            title="Settlement",
            width=60,
        )
    )

    console.print("\n[bold]Breakdown:[/bold]")
    console.print(f"  Ratio: {format_ratio(result.ratio)}")
    console.print(
        f"  Ratio split ({len(result.buckets.split)}): "
        f"{format_money(result.totals.split, symbol)} → partner "
        f"{format_money(result.breakdown.partner_split, symbol)}"
    )
    console.print(
        f"  50/50 split ({len(result.buckets.split50)}): "
        f"{format_money(result.totals.split50, symbol)} → partner "
        f"{format_money(result.breakdown.partner_5050, symbol)}"
    )
    console.print(
        f"  Personal ({len(result.buckets.personal)}): "
        f"{format_money(result.totals.personal, symbol)}"
    )

    if decided < total:
        console.print(
            f"  [yellow]⚠️  {total - decided} of {total} transactions not categorized[/yellow]"
        )

    if result.top:
        console.print()
        console.print(_bucket_table("Top Shared", result.top, symbol))


def _finish(session: SplitSession, symbol: str, share_file: Path | None):
    result = session.settlement()
    decided = sum(1 for txn in session.transactions if txn.id in session.store)
    display_summary(result, symbol, decided, session.total)

    share_text = format_share_text(session.share_summary(), symbol)
    if share_file:
        share_file.write_text(share_text, encoding="utf-8")
        console.print(f"\n[green]✓ Report written to {share_file}[/green]")
    else:
        console.print("\n[bold]Share:[/bold]")
        console.print(share_text, markup=False)


@app.command()
def split(
    file: Path = typer.Argument(..., help="Bank statement CSV export"),
    ratio: float | None = typer.Option(
        None, "--ratio", help="Your share of ratio splits (0.5-0.9)"
    ),
    fresh: bool = typer.Option(
        False, "--fresh", help="Ignore and discard saved decisions for this statement"
    ),
    share_file: Path | None = typer.Option(
        None, "--share-file", help="Write the share report to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Categorize a statement interactively and compute what your partner owes.

    ← personal, ↑ 50/50, → ratio split, u undo, +/- change ratio, q quit.
    Progress is saved after every decision; run again to resume.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)

        session, restored = _open_session(
            file, db, ratio, fresh, settings.day_first, settings.default_ratio
        )
        symbol = settings.currency_symbol

        console.print(
            f"\n[bold blue]Found {session.total} transactions[/bold blue] "
            f"(ratio {format_ratio(session.ratio)})"
        )
        if session.total == 0:
            console.print("[yellow]No transactions with an amount found.[/yellow]")
            return
        if restored:
            console.print(f"[dim]Resuming with {len(session.store)} saved decisions[/dim]")

        if not confirm_start(session.total):
            return

        session.start(resume=restored)

        while session.stage == Stage.CATEGORIZING:
            display_card(session, symbol)
            action = read_action()

            if action == QUIT:
                console.print("[yellow]Stopped. Progress saved.[/yellow]")
                return
            elif action == UNDO:
                if not session.undo():
                    console.print("[dim]Nothing to undo[/dim]")
            elif action in (RATIO_UP, RATIO_DOWN):
                step = RATIO_STEP if action == RATIO_UP else -RATIO_STEP
                db.set_ratio(session.set_ratio(session.ratio + step))
            else:
                signal = action_to_signal(action)
                if signal is not None:
                    session.apply_signal(signal)

        db.set_ratio(session.ratio)
        _finish(session, symbol, share_file)

        console.print("\n[bold green]✓ All transactions categorized![/bold green]")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def summary(
    file: Path = typer.Argument(..., help="Bank statement CSV export"),
    ratio: float | None = typer.Option(
        None, "--ratio", help="Your share of ratio splits (0.5-0.9)"
    ),
    share_file: Path | None = typer.Option(
        None, "--share-file", help="Write the share report to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show the settlement from saved decisions without categorizing."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)

        session, restored = _open_session(
            file, db, ratio, False, settings.day_first, settings.default_ratio
        )
        if not restored:
            console.print("[yellow]No saved decisions for this statement.[/yellow]")

        _finish(session, settings.currency_symbol, share_file)

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def reset(
    file: Path = typer.Argument(..., help="Bank statement CSV export"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Forget saved decisions for a statement."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)

        transactions = parse_transactions(
            load_csv_records(file), day_first=settings.day_first
        )
        if db.delete_decisions(compute_statement_key(transactions)):
            console.print("[green]✓ Saved decisions cleared[/green]")
        else:
            console.print("[dim]No saved decisions for this statement[/dim]")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            raise
        sys.exit(1)
    finally:
        if "db" in locals():
            db.close()


if __name__ == "__main__":
    app()

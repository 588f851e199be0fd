"""SaxoTrader CLI – konto, instrumenty, ceny, zlecenia, eksport księgowań.

Uruchomienie:
    saxotrader --help
    saxotrader token   --code … --client-id … --client-secret …
    saxotrader account --token …                    # lub SAXO_TOKEN=…
    saxotrader instr   -k EUR -a FxSpot             # alias instruments
    saxotrader prices  --uic 21 --asset-type FxSpot
    saxotrader order   --uic 21 --asset-type FxSpot --buy-sell Buy --amount 1000 --price 1.08
    saxotrader bookings eksport.csv --json
    saxotrader --debug …                            # pełne logi + traceback
"""

from __future__ import annotations

import json
import sys
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

import saxotrader
from saxotrader.api import Instruction, SaxoAPI, make_order
from saxotrader.config import ApiSettings
from saxotrader.errors import SaxoError, UpstreamRejected
from saxotrader.utils.log import setup_logger

console = Console()


def _settings(ctx: click.Context) -> ApiSettings:
    return ctx.obj["settings"]


def _api(ctx: click.Context, token: Optional[str]) -> SaxoAPI:
    settings = _settings(ctx)
    if token:
        settings = settings.model_copy(update={"token": token})
    if not settings.token:
        raise click.UsageError("Please provide a token (--token or SAXO_TOKEN).")
    return SaxoAPI.from_settings(settings)


token_option = click.option("--token", envvar="SAXO_TOKEN", help="Token OpenAPI (Bearer).")


# ────────────────────────────────[ grupa główna ]──────────────────────────────── #

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--debug",
    is_flag=True,
    help="Włącza logowanie DEBUG i pokazuje pełne tracebacki przy błędach.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Plik YAML/JSON z ustawieniami API.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_path: Optional[str]) -> None:
    """Klient Saxo OpenAPI (sim) i import eksportu transakcji."""
    setup_logger("DEBUG" if debug else "INFO", force=True)
    settings = ApiSettings.from_file(config_path) if config_path else ApiSettings.from_env()
    ctx.obj = {"debug": debug, "settings": settings}


# ────────────────────────────────[ OAuth2 ]────────────────────────────────────── #

@cli.command(name="token", short_help="Wymień kod OAuth2 na token.")
@click.option("--code", required=True, help="Authorization code z przekierowania OAuth2.")
@click.option("--client-id", envvar="SAXO_CLIENT_ID", required=True)
@click.option("--client-secret", envvar="SAXO_CLIENT_SECRET", required=True)
@click.option("--redirect-uri", default=None, help="Nadpisuje redirect_uri z konfiguracji.")
@click.pass_context
def token_cmd(
    ctx: click.Context,
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: Optional[str],
) -> None:
    """Code flow: POST na serwer logowania, wypisz odpowiedź jako JSON."""
    from saxotrader.auth import exchange_code

    update = {"client_id": client_id, "client_secret": client_secret}
    if redirect_uri:
        update["redirect_uri"] = redirect_uri
    grant = exchange_code(code, _settings(ctx).model_copy(update=update))
    click.echo(grant.model_dump_json())


# ────────────────────────────────[ konto ]─────────────────────────────────────── #

@cli.command(name="account", short_help="Użytkownik, klient, konta i saldo.")
@token_option
@click.pass_context
def account(ctx: click.Context, token: Optional[str]) -> None:
    """Przejdź: user -> client -> accounts -> saldo konta domyślnego."""
    api = _api(ctx, token)
    user = api.user()
    console.rule(f"[bold]{user.name}[/bold] ({user.user_id})")

    client = api.client()
    accounts = api.accounts()

    table = Table("AccountId", "AccountKey", "Currency", "Type", "Default")
    for acct in accounts:
        is_default = acct.account_key == client.default_account_key
        table.add_row(acct.account_id, acct.account_key, acct.currency, acct.account_type, "✓" if is_default else "")
    console.print(table)

    default = api.default_account(client, accounts)
    if default is None:
        console.print("[yellow]Brak konta domyślnego.[/yellow]")
        return
    bal = api.balance(default.account_key)
    console.print(
        f"Cash: {bal.cash_balance:.2f} {bal.currency}  "
        f"Total: {bal.total_value:.2f}  Open positions: {bal.open_positions_count}"
    )


# ────────────────────────────────[ instrumenty ]───────────────────────────────── #

@cli.command(name="instruments", short_help="Wyszukaj instrumenty.")
@token_option
@click.option("-k", "--keywords", default="", help="Słowa kluczowe (symbol/opis).")
@click.option("-a", "--asset-type", "asset_types", multiple=True, help="Typ aktywa, np. FxSpot, Stock.")
@click.option("-e", "--exchange", default="", help="ExchangeId, np. NYSE.")
@click.pass_context
def instruments(
    ctx: click.Context,
    token: Optional[str],
    keywords: str,
    asset_types: Tuple[str, ...],
    exchange: str,
) -> None:
    api = _api(ctx, token)
    found = api.instruments(
        Instruction(keywords=keywords, asset_types=list(asset_types), exchange_id=exchange)
    )
    table = Table("Uic", "Symbol", "AssetType", "Exchange", "Description")
    for a in found:
        table.add_row(str(a.identifier), a.symbol, a.asset_type, a.exchange_id, a.description)
    console.print(table)

# alias „instr”
cli.add_command(instruments, name="instr")


# ────────────────────────────────[ ceny ]──────────────────────────────────────── #

@cli.command(name="prices", short_help="Ceny (info prices) dla listy UIC.")
@token_option
@click.option("-u", "--uic", "uics", type=int, multiple=True, required=True)
@click.option("-a", "--asset-type", required=True)
@click.option("--amount", type=float, default=0.0, show_default=True)
@click.pass_context
def prices(
    ctx: click.Context,
    token: Optional[str],
    uics: Tuple[int, ...],
    asset_type: str,
    amount: float,
) -> None:
    api = _api(ctx, token)
    rows = api.prices(Instruction(uics=list(uics), asset_type=asset_type, amount=amount))
    table = Table("Uic", "Bid", "Ask", "Mid", "MarketState", "LastUpdated")
    for p in rows:
        q = p.quote
        table.add_row(str(p.uic), f"{q.bid:g}", f"{q.ask:g}", f"{q.mid:g}", q.market_state, p.last_updated)
    console.print(table)


# ────────────────────────────────[ zlecenie ]──────────────────────────────────── #

@cli.command(name="order", short_help="Złóż zlecenie na koncie domyślnym.")
@token_option
@click.option("-u", "--uic", type=int, required=True)
@click.option("-a", "--asset-type", required=True)
@click.option("--buy-sell", type=click.Choice(["Buy", "Sell"]), required=True)
@click.option("--amount", type=float, required=True)
@click.option("--price", type=float, default=0.0, show_default=True)
@click.option("--order-type", default="Limit", show_default=True)
@click.option("--duration", default="DayOrder", show_default=True)
@click.pass_context
def order(
    ctx: click.Context,
    token: Optional[str],
    uic: int,
    asset_type: str,
    buy_sell: str,
    amount: float,
    price: float,
    order_type: str,
    duration: str,
) -> None:
    api = _api(ctx, token)
    client = api.client()
    account_key = api.account_key or client.default_account_key
    instr = make_order(
        amount=amount,
        price=price,
        uic=uic,
        asset_type=asset_type,
        buy_sell=buy_sell,
        account_key=account_key,
        duration=duration,
        order_type=order_type,
    )
    res = api.place_order(instr)
    console.print(f"[bold green]OrderId[/bold green] {', '.join(res.order_ids) or '-'}")


# ────────────────────────────────[ księgowania ]───────────────────────────────── #

@cli.command(name="bookings", short_help="Wczytaj eksport księgowań (CSV).")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Wypisz rekordy jako JSON-lines.")
@click.option("--strict", is_flag=True, help="Pierwszy zły wiersz przerywa import.")
@click.option("--sep", default=",", show_default=True, help="Separator CSV.")
def bookings(path: str, as_json: bool, strict: bool, sep: str) -> None:
    """Zbinduj wiersze eksportu do rekordów i pokaż je (posortowane po dacie)."""
    from saxotrader.portfolio import Portfolio

    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        port = Portfolio().load_bookings(f, delimiter=sep, strict=strict)

    frame = port.to_frame()
    if as_json:
        for rec in frame.to_dict(orient="records"):
            click.echo(json.dumps(rec, default=str))
        return

    console.rule(f"[bold]Księgowania[/bold] ({len(port)}; pominięte: {port.skipped})")
    console.print(frame)


# ────────────────────────────────[ wersja ]───────────────────────────────────── #

@cli.command(name="ver", short_help="Pokaż wersję pakietu.")
def version_cmd() -> None:
    console.print(f"[bold green]SaxoTrader[/bold green] {saxotrader.__version__}")


# ────────────────────────────────[ entrypoint helper ]────────────────────────── #

def _main() -> None:
    try:
        cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        sys.exit(exc.exit_code)
    except click.exceptions.Abort:
        sys.exit(1)
    except SaxoError as exc:
        if "--debug" in sys.argv:
            raise
        console.print(f"[bold red]{exc.kind.value}[/bold red]: {exc}")
        detail = exc.error if isinstance(exc, UpstreamRejected) else None
        if detail is not None and detail.error_code:
            console.print(f"  {detail.error_code}: {detail.message}")
        sys.exit(1)
    except Exception:
        if "--debug" in sys.argv:
            raise
        console.print_exception(show_locals=False)
        sys.exit(1)


if __name__ == "__main__":  # python src/saxotrader/cli.py
    _main()

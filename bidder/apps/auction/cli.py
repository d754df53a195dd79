"""
Bidder auction command line interface
"""
import dataclasses
import json
import threading
from pathlib import Path
from typing import Any

import click

from bidder.apps.auction.client.bidder_client import BidderClient
from bidder.apps.auction.commands.search_auction_txs import SearchAuctionTxs, TxOrder
from bidder.apps.auction.config import BidderConfig
from bidder.apps.auction.domain.events import AuctionTxKind
from bidder.apps.auction.services.auction_tx_watcher_service import (
    AuctionTxWatcherService,
    AuctionTxWatcherServiceEvent,
    TxFilter,
)
from bidder.core.logging import configure_logging
from bidder.sui.bcs import BcsError
from bidder.sui.model import ObjectId, normalize_sui_address
from bidder.sui.rpc import SuiClient, SuiRpcError


class App:
    """
    Wires the client components from the config
    """

    def __init__(self, config: BidderConfig):
        self.config = config
        self.rpc = SuiClient(config.rpc_url)
        self.client = BidderClient(self.rpc, config.package_id, config.registry_id)

    @classmethod
    def from_config_file(cls, file: Path) -> "App":
        return cls(BidderConfig.from_config_file(file))


def to_json(obj: Any) -> str:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = dataclasses.asdict(obj)
    elif isinstance(obj, list):
        obj = [dataclasses.asdict(item) for item in obj]
    return json.dumps(obj, indent=3, default=str)


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(normalize_sui_address(value))
    except ValueError as err:
        raise click.BadParameter(str(err)) from err


@click.group
@click.option(
    "--config-file",
    required=True,
    envvar="BIDDER_CONFIG_FILE",
    type=click.Path(exists=True, resolve_path=True, readable=True, path_type=Path),
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path):
    """
    Decodes and watches `bidder::auction` transactions on Sui
    """
    app = App.from_config_file(config_file)
    configure_logging(app.config.log_level)
    ctx.obj = app


@cli.command
@click.argument("digest")
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in AuctionTxKind]),
    help="Decodes the call to this auction function, e.g., to decode the item transfer of a settlement transaction",
)
@click.pass_obj
def decode_tx(app: App, digest: str, kind: str | None):
    """
    Decodes an auction transaction
    """
    try:
        resp = app.rpc.get_transaction_block(digest)
    except SuiRpcError as err:
        raise click.ClickException(str(err)) from err

    parser = app.client.tx_parser
    tx = parser.parse_auction_tx(resp) if kind is None else parser.decode(AuctionTxKind(kind), resp)
    if tx is None:
        raise click.ClickException(f"not an auction transaction: {digest}")
    click.echo(to_json(tx))


@cli.command
@click.argument("auction_id")
@click.pass_obj
def auction(app: App, auction_id: str):
    """
    Displays the current auction state
    """
    try:
        auction_obj = app.client.fetch_auction(parse_object_id(auction_id))
    except SuiRpcError as err:
        raise click.ClickException(str(err)) from err

    if auction_obj is None:
        raise click.ClickException(f"auction not found: {auction_id}")
    click.echo(to_json(auction_obj))


@cli.command
@click.argument("auction_id")
@click.option("--cursor", help="continues from a previous search")
@click.option("--limit", type=click.IntRange(1, 50), default=50, show_default=True)
@click.option(
    "--order",
    type=click.Choice([order.value for order in TxOrder]),
    default=TxOrder.DESCENDING.value,
    show_default=True,
)
@click.pass_obj
def history(app: App, auction_id: str, cursor: str | None, limit: int, order: str):
    """
    Lists the transactions that changed the auction
    """
    try:
        result = app.client.fetch_txs_by_auction_id(
            parse_object_id(auction_id), cursor, limit, TxOrder(order)
        )
    except SuiRpcError as err:
        raise click.ClickException(str(err)) from err
    click.echo(to_json(result))


@cli.command
@click.argument("user_id")
@click.option(
    "--show",
    type=click.Choice(["recent", "auctions", "bids"]),
    default="recent",
    show_default=True,
    help="recent auctions and bids, or a page of either",
)
@click.option("--cursor", type=click.IntRange(min=0), help="continues from a previous page")
@click.option("--limit", type=click.IntRange(1, 50), default=10, show_default=True)
@click.option(
    "--order",
    type=click.Choice([order.value for order in TxOrder]),
    default=TxOrder.DESCENDING.value,
    show_default=True,
)
@click.pass_obj
def user_history(
    app: App, user_id: str, show: str, cursor: int | None, limit: int, order: str
):
    """
    Lists the auctions created and the bids placed by a user
    """
    object_id = parse_object_id(user_id)
    try:
        match show:
            case "auctions":
                result: Any = app.client.fetch_user_auctions(object_id, cursor, limit, TxOrder(order))
            case "bids":
                result = app.client.fetch_user_bids(object_id, cursor, limit, TxOrder(order))
            case _:
                result = app.client.fetch_user_recent_auctions_and_bids(object_id, limit, limit)
    except (SuiRpcError, BcsError) as err:
        raise click.ClickException(str(err)) from err

    if result is None:
        raise click.ClickException(f"user not found: {user_id}")
    click.echo(to_json(result))


@cli.command
@click.option(
    "--kind",
    "kinds",
    multiple=True,
    type=click.Choice([kind.value for kind in AuctionTxKind]),
    help="auction function to watch - may be specified multiple times",
)
@click.option(
    "--auction-id",
    "auction_ids",
    multiple=True,
    help="auction to watch - may be specified multiple times",
)
@click.pass_obj
def watch(app: App, kinds: tuple[str, ...], auction_ids: tuple[str, ...]):
    """
    Prints auction transactions as they are executed, until interrupted.
    Watches for new auctions and bids by default.
    """
    filters: list[TxFilter] = [AuctionTxKind(kind) for kind in kinds]
    filters.extend(parse_object_id(auction_id) for auction_id in auction_ids)

    kwargs: dict[str, Any] = {}
    if filters:
        kwargs["filters"] = filters
    service = AuctionTxWatcherService(
        SearchAuctionTxs(app.rpc, app.client.tx_parser),
        poll_interval=app.config.poll_interval,
        batch_size=app.config.batch_size,
        **kwargs,
    )

    lock = threading.Lock()

    def on_event(event: AuctionTxWatcherServiceEvent):
        with lock:
            for tx in event.txs:
                click.echo(to_json(tx))

    service.observable.subscribe(on_event)
    service.start()
    try:
        service.await_stopped()
    except KeyboardInterrupt:
        click.echo("stopping ...", err=True)
    finally:
        service.stop()


if __name__ == "__main__":
    cli()  # pylint: disable=no-value-for-parameter

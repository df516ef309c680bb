"""Command-line interface for the Counterparty decoder."""

import sys
import json
from typing import Optional
import click
import structlog

from counterparty_decoder.core.blockcypher_client import BlockCypherClient
from counterparty_decoder.core.message_decoder import MessageDecoder
from counterparty_decoder.core.transaction_decoder import TransactionDecoder
from counterparty_decoder.errors import InvalidTransactionDocument, TransactionFetchError
from counterparty_decoder.models.config import DecoderConfig
from counterparty_decoder.models.messages import Decoded, DecodeFailure
from counterparty_decoder.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def _dump(document, output=None) -> None:
    click.echo(json.dumps(document, indent=2, ensure_ascii=False, default=str), file=output)


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.option('--log-level', '-l', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, config_file: Optional[str], log_level: str):
    """Counterparty transaction decoder CLI."""
    ctx.ensure_object(dict)

    try:
        if config_file:
            config = DecoderConfig(_env_file=config_file)
        else:
            config = DecoderConfig()
        config.log_level = log_level
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config)
    ctx.obj['config'] = config


@cli.command()
@click.argument('tx_hash')
@click.option('--output', '-o', type=click.File('w'), default='-',
              help='Output file (default: stdout)')
@click.pass_context
def tx(ctx, tx_hash: str, output):
    """Fetch a transaction from BlockCypher and decode it."""
    config = ctx.obj['config']
    client = BlockCypherClient(config)

    try:
        document = client.get_transaction(tx_hash)
        decoded = TransactionDecoder(config).decode(document)
    except (ValueError, TransactionFetchError, InvalidTransactionDocument) as e:
        click.echo(f"❌ Failed to decode {tx_hash}: {e}", err=True)
        sys.exit(1)
    finally:
        client.close()

    _dump(decoded.to_dict(), output)


@cli.command("file")
@click.argument("path", type=click.File("r"))
@click.option('--output', '-o', type=click.File('w'), default='-',
              help='Output file (default: stdout)')
@click.pass_context
def decode_file(ctx, path, output):
    """Decode a saved BlockCypher transaction document."""
    config = ctx.obj['config']

    try:
        document = json.load(path)
        decoded = TransactionDecoder(config).decode(document)
    except (ValueError, InvalidTransactionDocument) as e:
        click.echo(f"❌ Failed to decode {path.name}: {e}", err=True)
        sys.exit(1)

    _dump(decoded.to_dict(), output)


@cli.command()
@click.argument('data_hex')
@click.option('--block-height', '-b', type=int, required=True,
              help='Block height of the transaction (selects the issuance layout)')
@click.pass_context
def data(ctx, data_hex: str, block_height: int):
    """Decode a message payload given without the CNTRPRTY prefix."""
    config = ctx.obj['config']
    result = MessageDecoder(config.format_change_height).decode_data(data_hex, block_height)

    if isinstance(result, DecodeFailure):
        click.echo(f"❌ {result.error.reason}: {result.error}", err=True)
        sys.exit(1)

    document = result.header.to_dict()
    if isinstance(result, Decoded):
        document['msg_decoded'] = result.message.to_dict()
    _dump(document)


@cli.command()
def version():
    """Show version information."""
    from counterparty_decoder import __version__, __description__

    click.echo(f"Counterparty Decoder v{__version__}")
    click.echo(__description__)


if __name__ == '__main__':
    cli()

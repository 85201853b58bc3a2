#!/usr/bin/env python3
"""multisend: batch token or native-currency transfers through a BatchSender contract.

Usage:
    multisend send --input <file> --batch <address> (--token <address> | --native)
                   [--strict] [--no-checkpoint] [--dry-run] [--verbose] [--json-logs]
    multisend convert --input <file.json> --output <file.csv>

Environment (``.env`` is loaded automatically):
    PRIVATE_KEY, RPC_URL, INPUT_FILE, TOKEN_ADDRESS, BATCH_SENDER_ADDRESS,
    DECIMALS, NATIVE, plus the engine settings read by MultisendConfig
    (MAX_GAS_FRACTION, RATE_LIMIT_RPS, RETRY_MAX_ATTEMPTS, CHECKPOINT_FILE, ...)

Examples:
    # ERC-20 batch from a CSV file
    multisend send --input recipients.csv --token 0xToken --batch 0xBatchSender

    # Native currency, plan only
    multisend send --input recipients.json --batch 0xBatchSender --native --dry-run

    # Convert a JSON recipient list to CSV
    multisend convert --input samples/csvjson.json --output samples/multisend.csv
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from multisend import __version__
from multisend.connectors.evm import DEFAULT_RPC_URL, EVMGateway
from multisend.core import (
    ConfigurationError,
    InvalidInputError,
    MultisendConfig,
    MultisendError,
    ValidationMode,
)
from multisend.io import convert_json_to_csv, load_entries
from multisend.logging_config import configure_logging
from multisend.models import SessionParams
from multisend.runtime import BatchSendEngine, RunReport

logger = logging.getLogger("multisend.cli")

DEFAULT_INPUT = "./samples/csvjson.json"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUE_VALUES


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e


def print_report(report: RunReport) -> None:
    """Print a human-readable run summary."""
    validation = report.validation
    print()
    print(f"Session:            {report.session_id}")
    print(f"Recipients to send: {len(report.entries)}")
    print(f"Skipped invalid:    {validation.skipped_invalid_address} address")
    print(f"Skipped zero:       {validation.skipped_zero}")
    print(f"Already sent:       {report.skipped_confirmed}")
    print(f"Gas budget:         {report.budget.usable} of {report.budget.ceiling}")
    print(f"Chunk size:         {report.probe.chunk_size}"
          f"{' (degraded)' if report.probe.degraded else ''}")
    print(f"Chunks:             {len(report.plans)}")
    print(f"Total units:        {report.total_units}")
    if report.submission is None:
        print("\n[DRY RUN] Nothing was submitted.")
        for plan in report.plans:
            print(
                f"  chunk {plan.chunk_index + 1}: {plan.size} recipients, "
                f"{plan.total_units} units"
            )
        return
    print()
    for receipt in report.submission.receipts:
        marker = "" if receipt.checkpointed else "  (not checkpointed)"
        print(f"  ✓ chunk {receipt.chunk_index + 1}: {receipt.handle} "
              f"gasUsed={receipt.cost_used}{marker}")
    print(f"\nAll chunks sent successfully. chunks={report.submission.chunks_sent} "
          f"recipients={report.submission.recipients_sent} total={report.submission.total_units}")


async def _send(args: argparse.Namespace, config: MultisendConfig) -> RunReport:
    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ConfigurationError("Set PRIVATE_KEY env")

    input_path = args.input or os.environ.get("INPUT_FILE")
    if not input_path:
        input_path = DEFAULT_INPUT
        logger.info(f"--input not provided; using default: {DEFAULT_INPUT}")

    native = args.native or _env_flag("NATIVE")
    token_address = None if native else (args.token or os.environ.get("TOKEN_ADDRESS"))
    batch_address = args.batch or os.environ.get("BATCH_SENDER_ADDRESS")
    if not batch_address:
        raise ConfigurationError(
            "--batch BatchSender contract address is required or set BATCH_SENDER_ADDRESS"
        )
    if not native and not token_address:
        raise ConfigurationError("ERC20 mode requires --token or TOKEN_ADDRESS")

    logger.info(f"Reading recipients from: {input_path}")
    try:
        raw = load_entries(input_path)
    except OSError as e:
        raise InvalidInputError(f"Cannot read input file {input_path}: {e}") from e

    gateway = EVMGateway.from_rpc(
        os.environ.get("RPC_URL") or DEFAULT_RPC_URL,
        private_key,
        batch_address,
        token_address=token_address,
    )
    engine = BatchSendEngine(gateway, asset=gateway.asset, config=config)
    session = SessionParams(
        sender=gateway.sender,
        contract=gateway.batch_address,
        asset=gateway.asset_id,
        input_source=str(Path(input_path).resolve()),
    )
    try:
        decimals = await engine.resolve_decimals(_env_int("DECIMALS"))
        return await engine.run(
            raw,
            session,
            decimals=decimals,
            mode=ValidationMode.STRICT if args.strict else ValidationMode.TOLERANT,
            dry_run=args.dry_run,
        )
    finally:
        await gateway.close()


def cmd_send(args: argparse.Namespace) -> int:
    """Validate, probe and submit a recipient list."""
    try:
        config = MultisendConfig.from_env()
        if args.no_checkpoint:
            config = dataclasses.replace(config, checkpoints_enabled=False)
        report = asyncio.run(_send(args, config))
    except KeyboardInterrupt:
        print("Interrupted. Confirmed chunks are checkpointed; re-run to resume.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except (InvalidInputError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except MultisendError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.debug("Unhandled failure", exc_info=True)
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print_report(report)
    return EXIT_OK


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert a JSON recipient array to CSV."""
    try:
        written = convert_json_to_csv(args.input, args.output)
    except (InvalidInputError, OSError) as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    print(f"Wrote {written} rows to {args.output}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multisend",
        description="Batch transfers through a BatchSender contract",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Send a recipient list in gas-sized chunks")
    send.add_argument("--input", help="Recipient file (.json or .csv)")
    send.add_argument("--batch", help="BatchSender contract address")
    asset = send.add_mutually_exclusive_group()
    asset.add_argument("--token", help="ERC-20 token address")
    asset.add_argument("--native", action="store_true", help="Send the native currency")
    send.add_argument(
        "--strict", action="store_true", help="Fail on malformed addresses instead of skipping"
    )
    send.add_argument("--no-checkpoint", action="store_true", help="Disable resumption checkpoints")
    send.add_argument("--dry-run", action="store_true", help="Probe and plan without sending")
    send.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    send.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    send.set_defaults(func=cmd_send)

    convert = subparsers.add_parser("convert", help="Convert a JSON recipient list to CSV")
    convert.add_argument("--input", default="samples/csvjson.json", help="JSON input file")
    convert.add_argument("--output", default="samples/multisend.csv", help="CSV output file")
    convert.set_defaults(func=cmd_convert)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(
        verbose=getattr(args, "verbose", False) or _env_flag("VERBOSE"),
        json_output=getattr(args, "json_logs", False),
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

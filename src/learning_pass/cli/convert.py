"""
CLI for converting one registration payload into a Symphony flat file.

Usage:
    # Validate, run the partner note hook and write the flat file
    python -m learning_pass.cli convert --customer customer.json --partner neos \
        --output /tmp/customer.flat

    # Log the flat document instead of writing it
    python -m learning_pass.cli convert --customer customer.json

Exit codes: 0 registration accepted, 1 registration rejected, 2 configuration
or input file problem.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from learning_pass.config.settings import get_settings
from learning_pass.domain.customer.models import EMPTY_CUSTOMER_ERROR
from learning_pass.domain.customer.service import CustomerValidator, missing_required_fields
from learning_pass.domain.flat.serializer import FlatSerializer
from learning_pass.domain.flat.writer import write_flat
from learning_pass.domain.registration.status import RegistrationResponse
from learning_pass.infrastructure.settings.loader import (
    PolicyConfigError,
    load_library_policy,
    load_partner_policies,
)
from learning_pass.utils.date_parser import parse_date
from learning_pass.utils.logging import bind_context, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_CONFIG = 2


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _read_customer(path: Path) -> Any:
    """Raw payload, or ``None`` when the file is not valid JSON."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("cli.invalid_customer_json", path=str(path), error=str(e))
            return None


def _output_path(args: argparse.Namespace, barcode: str) -> Optional[Path]:
    if args.output:
        return Path(args.output)
    settings = get_settings()
    if settings.flat_output_dir:
        return Path(settings.flat_output_dir) / f"{barcode or 'customer'}.flat"
    return None


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="learning_pass.cli convert",
        description="Validate a customer payload and emit a Symphony flat file",
    )
    parser.add_argument("--customer", required=True, help="Customer JSON file")
    parser.add_argument("--partner", default="default", help="Partner policy name (file stem)")
    parser.add_argument("--library", default=settings.library_config, help="Library policy YAML")
    parser.add_argument("--partners-dir", default=settings.partners_dir, help="Directory of partner policies")
    parser.add_argument("--output", help="Flat file to write (default: LP_FLAT_OUTPUT_DIR or the log)")
    parser.add_argument(
        "--no-overwrite",
        action="store_true",
        default=not settings.flat_overwrite,
        help="Fail instead of replacing an existing flat file",
    )
    parser.add_argument("--today", help="Reference date (YYYY-MM-DD) for age and expiry rules")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = bind_context(partner=args.partner, command="convert")

    today: Optional[date] = None
    if args.today:
        today = parse_date(args.today)
        if today is None:
            _print_json({"error": f"Invalid --today value: {args.today}"})
            return EXIT_CONFIG

    try:
        library = load_library_policy(args.library)
        partners = load_partner_policies(args.partners_dir)
    except PolicyConfigError as e:
        log.error("cli.policy_config_error", error=str(e))
        _print_json({"error": str(e)})
        return EXIT_CONFIG

    partner = partners.get(args.partner)
    if partner is None:
        message = f"Unknown partner '{args.partner}'. Available: {sorted(partners)}"
        log.error("cli.unknown_partner")
        _print_json({"error": message})
        return EXIT_CONFIG

    customer_path = Path(args.customer)
    try:
        raw = _read_customer(customer_path)
    except OSError as e:
        _print_json({"error": f"Cannot read customer file {customer_path}: {e}"})
        return EXIT_CONFIG

    validator = CustomerValidator(library, partner, today=today)
    customer, errors = validator.validate(raw)
    missing = [] if EMPTY_CUSTOMER_ERROR in errors else missing_required_fields(customer, validator.policy)

    written: Optional[bool] = None
    flat_path: Optional[Path] = None
    if EMPTY_CUSTOMER_ERROR not in errors and not missing:
        serializer = FlatSerializer(library.flat_defaults or None)
        record = serializer.to_flat(customer, partner.flat_defaults)
        flat_path = _output_path(args, customer.barcode)
        result = write_flat(record, flat_path, overwrite=not args.no_overwrite)
        if flat_path is not None:
            written = result.success
            if not result.success:
                errors = [*errors, result.error or "Flat file not written"]

    response = RegistrationResponse.from_conversion(customer, errors, missing, written)
    log.info("cli.converted", status=int(response.status), error_count=len(errors))
    _print_json(
        {
            **response.to_dict(),
            "summary": response.summary(),
            "flat": str(flat_path) if written else None,
        }
    )
    return EXIT_REJECTED if response.has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

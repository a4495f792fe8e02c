"""Command-line interface for generating service descriptions."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from adapter.yaml_loader import load_description
from servicedesc.errors import WsdlBuildError
from wsdlforge.validation import validate_document

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a WSDL document from a YAML service description")
    parser.add_argument("--description", required=True, help="YAML service description")
    parser.add_argument("--output", help="Output WSDL file (defaults to stdout)")
    parser.add_argument("--wsdl-version", choices=["1.1", "2.0"], help="Override the WSDL version")
    parser.add_argument("--soap-version", choices=["1.1", "1.2"], help="Override the SOAP version")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only resolve references and report problems",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s: %(message)s")

    try:
        doc = load_description(
            args.description,
            wsdl_version=args.wsdl_version,
            soap_version=args.soap_version,
        )
    except WsdlBuildError as exc:
        raise SystemExit(f"Invalid description {args.description}: {exc}") from exc
    if doc is None:
        raise SystemExit(f"Invalid description: {args.description}")

    if args.check:
        ok, logs = validate_document(doc)
        print(logs)
        if not ok:
            raise SystemExit(1)
        return

    try:
        text = doc.build()
    except WsdlBuildError as exc:
        raise SystemExit(f"Cannot serialize {doc.name}: {exc}") from exc

    if args.output is None:
        sys.stdout.write(text)
        return
    Path(args.output).write_text(text, encoding="utf-8")
    logger.info("Wrote %s", args.output)
    print(f"Wrote {args.output}")


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    main(sys.argv[1:])

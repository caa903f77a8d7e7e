"""Main entry point: reads a speedtest result on stdin and pushes it via remote write."""
import argparse
import logging
import sys
from typing import BinaryIO, List, Mapping, Optional, TextIO

from speedtest_prom.builder import build_base_labels, build_metrics
from speedtest_prom.config import load_config
from speedtest_prom.errors import (
    EncodingError, FormatError, InputError, ProtocolError, SpeedtestPromError, TransportError
)
from speedtest_prom.exposition import render_text
from speedtest_prom.labels import (
    duplicate_label_names, invalid_label_names, labels_from_mapping, parse_labels
)
from speedtest_prom.remote_write import RemoteWriteClient
from speedtest_prom.result import parse_result

logger = logging.getLogger(__name__)


def setup_logging(log_level: str):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Push a speedtest JSON result (read from stdin) to a Prometheus remote-write endpoint"
    )
    parser.add_argument(
        "--labels",
        default="",
        help="Additional labels in format 'key1=value1,key2=value2'"
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to an optional configuration YAML file"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the series in text exposition format instead of pushing them"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (overrides LOG_LEVEL and the configuration file)"
    )
    return parser


def read_input(stream) -> bytes:
    """Read the whole input stream."""
    source: BinaryIO = getattr(stream, "buffer", stream)
    try:
        data = source.read()
    except OSError as e:
        raise InputError(f"Error reading input: {e}") from e
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


def run(
    args: argparse.Namespace,
    stdin=None,
    stdout: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> None:
    """Run one push. Every failure surfaces as a SpeedtestPromError."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    result = parse_result(read_input(stdin))
    extra_labels = parse_labels(args.labels)

    config = load_config(args.config, environ=environ, require_credentials=not args.dry_run)
    if not args.log_level:
        logging.getLogger().setLevel(
            getattr(logging, config.global_.log_level.upper(), logging.INFO)
        )

    labels: List = labels_from_mapping(config.labels) + extra_labels
    base_labels = build_base_labels(result, labels)

    if invalid := invalid_label_names(base_labels):
        logger.warning(f"Label names not accepted by Prometheus: {invalid}")
    if duplicates := duplicate_label_names(base_labels):
        logger.warning(f"Duplicate label names will be sent as-is: {duplicates}")

    metrics = build_metrics(result)
    client = RemoteWriteClient(config.remote_write)

    if args.dry_run:
        write_request = client.build_write_request(metrics, base_labels)
        body = client.encode(write_request)
        stdout.write(render_text(write_request))
        logger.info(
            f"Dry run: {len(write_request.timeseries)} series, "
            f"{write_request.ByteSize()} bytes -> {len(body)} bytes (snappy compressed), not pushed"
        )
        return

    client.push(metrics, base_labels)
    logger.info("Metrics pushed successfully")


def describe_error(error: SpeedtestPromError) -> str:
    """One-line diagnostic, prefixed with the stage that failed."""
    message = " ".join(str(error).split())
    if isinstance(error, FormatError):
        return f"Error parsing labels: {message}"
    if isinstance(error, (EncodingError, TransportError, ProtocolError)):
        return f"Error pushing metrics: {message}"
    # InputError and ConfigError messages already name their stage
    return message


def main(argv: Optional[List[str]] = None):
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "INFO")

    try:
        run(args)
    except SpeedtestPromError as e:
        if isinstance(e, ProtocolError) and e.body:
            logger.debug(f"Response body: {e.body}")
        logger.error(describe_error(e))
        sys.exit(1)


if __name__ == "__main__":
    main()

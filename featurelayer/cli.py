"""Command line access to a single ArcGIS feature layer."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, TextIO

from .features import DeleteParams, EditParams, FeatureLayer, QueryParams
from .geometry import envelope_around
from .geometry.filters import intersects
from .session import DEFAULT_TIMEOUT, Session

OUTPUT_FORMATS = ("json", "csv", "xlsx")


def create_session(token: Optional[str], referer: Optional[str], timeout: Optional[float]) -> Session:
    if timeout is None:
        timeout = float(os.getenv("ARCGIS_TIMEOUT") or DEFAULT_TIMEOUT)
    logging.debug("TRACE: create_session(referer='%s', timeout=%s)", referer, timeout)
    return Session(token=token, referer=referer, timeout=timeout)


def _load_features(path: str) -> List[Dict[str, Any]]:
    """Read features from a JSON file holding a list or a feature set."""

    if path == "-":
        payload = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
    if isinstance(payload, dict):
        payload = payload.get("features", [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of features in '{path}'")
    return payload


def _edit_params(args: argparse.Namespace, cls=EditParams):
    return cls(
        gdb_version=args.gdb_version,
        rollback_on_failure=True if args.rollback else None,
    )


def _query_params(args: argparse.Namespace) -> QueryParams:
    params = QueryParams(
        where=args.where,
        out_fields=args.out_fields,
        return_geometry=args.return_geometry,
        out_sr=args.out_sr,
        order_by_fields=args.order_by,
        result_offset=args.offset,
        result_record_count=args.limit,
        return_count_only=True if args.count_only else None,
        return_ids_only=True if args.ids_only else None,
    )
    if args.near:
        lat, lng, radius = args.near
        params.extra.update(intersects(envelope_around(lat, lng, radius)))
    return params


def feature_rows(features: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten features into attribute rows."""

    return [dict(feature.get("attributes") or {}) for feature in features]


def _columns(rows: List[Dict[str, Any]]) -> List[str]:
    columns: List[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def write_csv(rows: List[Dict[str, Any]], stream: TextIO) -> None:
    writer = csv.DictWriter(stream, fieldnames=_columns(rows), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)


def write_excel_workbook(rows: List[Dict[str, Any]], path: str) -> None:
    if not rows:
        raise RuntimeError("No results available to write to the Excel workbook.")

    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("openpyxl is required for --format xlsx. Install via 'pip install openpyxl'.") from exc

    columns = _columns(rows)
    wb = Workbook()
    ws = wb.active
    ws.title = "Features"
    ws.append(columns)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append([_excel_value(row.get(column)) for column in columns])
    ws.freeze_panes = "A2"
    wb.save(path)


def _excel_value(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


def _emit_json(payload: Any, output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
    print(text)


def _emit_query(payload: Dict[str, Any], args: argparse.Namespace) -> None:
    if args.format == "json" or "features" not in payload:
        _emit_json(payload, args.output)
        return

    rows = feature_rows(payload.get("features", []))
    if args.format == "xlsx":
        if not args.output:
            raise RuntimeError("--format xlsx requires --output")
        write_excel_workbook(rows, args.output)
        logging.info("Wrote %d features to %s", len(rows), args.output)
        return

    if args.output:
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            write_csv(rows, fh)
    else:
        write_csv(rows, sys.stdout)


def _add_edit_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--gdb-version", help="Geodatabase version to apply the edits to")
    parser.add_argument(
        "--rollback",
        action="store_true",
        help="Apply the edits only if all of them succeed",
    )


def parse_args(argv: List[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--referer",
        default=os.getenv("ARCGIS_REFERER"),
        help="Referer header to send with requests (default: ARCGIS_REFERER or the layer host)",
    )
    common.add_argument(
        "--token",
        default=os.getenv("ARCGIS_TOKEN"),
        help="Token appended to every request (defaults to the ARCGIS_TOKEN environment variable)",
    )
    common.add_argument(
        "--timeout",
        type=float,
        help=f"Request timeout in seconds (default: ARCGIS_TIMEOUT or {DEFAULT_TIMEOUT:g})",
    )
    common.add_argument("--output", help="Optional file path to save the response")
    common.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")

    parser = argparse.ArgumentParser(
        prog="featurelayer",
        description="Read and edit features of an ArcGIS feature service layer.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    get_parser = commands.add_parser("get", parents=[common], help="Fetch one feature by object id")
    get_parser.add_argument("layer_url", help="Feature layer URL")
    get_parser.add_argument("id", type=int, help="Object id of the feature")

    query_parser = commands.add_parser("query", parents=[common], help="Query features")
    query_parser.add_argument("layer_url", help="Feature layer URL")
    query_parser.add_argument("--where", help="WHERE clause (default: 1=1)")
    query_parser.add_argument(
        "--out-fields",
        help="Comma-separated list of fields to return (default: all fields)",
    )
    query_parser.add_argument(
        "--near",
        nargs=3,
        metavar=("LAT", "LNG", "RADIUS"),
        type=float,
        help="Only return features intersecting an envelope of RADIUS meters around LAT/LNG",
    )
    query_parser.add_argument(
        "--no-geometry",
        dest="return_geometry",
        action="store_false",
        help="Omit geometry from the response payload",
    )
    query_parser.set_defaults(return_geometry=None)
    query_parser.add_argument("--out-sr", type=int, help="WKID of the output spatial reference")
    query_parser.add_argument("--order-by", help="ORDER BY clause, e.g. 'NAME DESC'")
    query_parser.add_argument("--limit", type=int, help="Maximum number of records to return")
    query_parser.add_argument("--offset", type=int, help="Number of records to skip")
    query_parser.add_argument("--count-only", action="store_true", help="Only return the feature count")
    query_parser.add_argument("--ids-only", action="store_true", help="Only return object ids")
    query_parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="json",
        help="Output format for the features (default: %(default)s)",
    )

    add_parser = commands.add_parser("add", parents=[common], help="Add features from a JSON file")
    add_parser.add_argument("layer_url", help="Feature layer URL")
    add_parser.add_argument("features", help="JSON file with a list of features ('-' for stdin)")
    _add_edit_options(add_parser)

    update_parser = commands.add_parser("update", parents=[common], help="Update features from a JSON file")
    update_parser.add_argument("layer_url", help="Feature layer URL")
    update_parser.add_argument("features", help="JSON file with a list of features ('-' for stdin)")
    _add_edit_options(update_parser)

    delete_parser = commands.add_parser("delete", parents=[common], help="Delete features by object id")
    delete_parser.add_argument("layer_url", help="Feature layer URL")
    delete_parser.add_argument("ids", type=int, nargs="+", help="Object ids to delete")
    _add_edit_options(delete_parser)

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    level = logging.DEBUG if verbose else logging.WARNING
    root_logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def run(args: argparse.Namespace, session: Optional[Session] = None) -> None:
    if session is None:
        session = create_session(args.token, args.referer, args.timeout)
    layer = FeatureLayer(args.layer_url, session=session)
    logging.debug("TRACE: run(command='%s', layer=%s)", args.command, layer.url)

    if args.command == "get":
        _emit_json(layer.get(args.id), args.output)
    elif args.command == "query":
        _emit_query(layer.query(_query_params(args)), args)
    elif args.command == "add":
        _emit_json(layer.add(_load_features(args.features), _edit_params(args)), args.output)
    elif args.command == "update":
        _emit_json(layer.update(_load_features(args.features), _edit_params(args)), args.output)
    elif args.command == "delete":
        _emit_json(layer.delete(args.ids, _edit_params(args, DeleteParams)), args.output)


def main(argv: Optional[List[str]] = None):
    """Run one feature layer command and print the result."""

    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.verbose)

    try:
        run(args)
    except Exception as exc:
        logging.debug("TRACE: main(exception: %s)", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

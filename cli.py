import argparse
import json
import os
import sys
import uuid as _uuid
from pathlib import Path

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.schema_cache_repo import SchemaCacheRepo
from models.sync_config import load_sync_config
from pipelines.extraction_orchestrator import ExtractionOrchestrator
from services.messaging import MessageRouter
from services.sync_service import AirtableSyncService
from sources.html_page import HtmlFilePage
from utils.logging_setup import init_logging
from utils.scheduler import SystemScheduler


def _print(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _router(args, page=None) -> MessageRouter:
    settings = get_settings()
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    service = AirtableSyncService(settings=settings, store=SchemaCacheRepo(conn))
    orchestrator = None
    if page is not None:
        orchestrator = ExtractionOrchestrator(page, SystemScheduler(), settings=settings)
    return MessageRouter(service, orchestrator)


def _config_payload(args) -> dict:
    return load_sync_config(args.config).model_dump(by_alias=True)


def _record_payload(args, router: MessageRouter) -> dict:
    """Record for save/test-mappings: a JSON file, or a fresh extraction from --html."""
    if args.data:
        data = json.loads(Path(args.data).read_text(encoding="utf-8"))
        return data.get("data") or data
    if args.html:
        extracted = router.handle({"action": "extractProfile"})
        if not extracted.get("success"):
            _print(extracted)
            sys.exit(1)
        return extracted["data"]
    raise SystemExit("Provide --data or --html/--url")


def _page(args):
    if getattr(args, "html", None):
        return HtmlFilePage(Path(args.html), args.url or "")
    return None


def _finish(response: dict) -> None:
    _print(response)
    if not response.get("success"):
        sys.exit(1)


def cmd_bootstrap(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    print("Schema ready")


def cmd_extract(args):
    router = _router(args, _page(args))
    _finish(router.handle({"action": "extractProfile"}))


def cmd_save(args):
    router = _router(args, _page(args))
    record = _record_payload(args, router)
    config = _config_payload(args)
    _finish(router.handle({
        "action": "saveToAirtable",
        "data": record,
        "config": config,
        "fieldMappings": config.get("fieldMappings") or None,
    }))


def cmd_test_connection(args):
    router = _router(args)
    _finish(router.handle({"action": "testAirtableConnection", "config": _config_payload(args)}))


def cmd_fields(args):
    router = _router(args)
    _finish(router.handle({"action": "fetchAvailableFields", "config": _config_payload(args)}))


def cmd_test_mappings(args):
    router = _router(args, _page(args))
    record = _record_payload(args, router)
    config = _config_payload(args)
    _finish(router.handle({
        "action": "testFieldMappings",
        "data": record,
        "config": config,
        "fieldMappings": config.get("fieldMappings") or None,
    }))


def _add_record_source(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", help="Path to a JSON profile record")
    p.add_argument("--html", help="Path to a saved LinkedIn profile page")
    p.add_argument("--url", help="URL the saved page was captured from")


def main(argv=None):
    settings = get_settings()
    init_logging(settings.log_level)
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex

    parser = argparse.ArgumentParser(description="LinkedIn profile to Airtable CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite schema cache (default from settings)")
    parser.add_argument("--config", default=settings.sync_config_path, help="Path to sync config JSON (falls back to AIRTABLE_* env)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create the schema cache table")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_ext = sub.add_parser("extract", help="Extract a profile record from a saved page")
    p_ext.add_argument("--html", required=True, help="Path to a saved LinkedIn profile page")
    p_ext.add_argument("--url", required=True, help="URL the saved page was captured from")
    p_ext.set_defaults(func=cmd_extract)

    p_save = sub.add_parser("save", help="Save a profile record to Airtable")
    _add_record_source(p_save)
    p_save.set_defaults(func=cmd_save)

    p_conn = sub.add_parser("test-connection", help="Check token, base and table")
    p_conn.set_defaults(func=cmd_test_connection)

    p_fields = sub.add_parser("fields", help="List table fields and their types")
    p_fields.set_defaults(func=cmd_fields)

    p_map = sub.add_parser("test-mappings", help="Create and delete a [TEST] record with the current mappings")
    _add_record_source(p_map)
    p_map.set_defaults(func=cmd_test_mappings)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request

from chart.chart_assembler import ChartDataAssembler
from config import Settings, get_settings
from contracts.chart_config import ChartConfig, ChartFilters
from contracts.errors import ConfigurationError
from logging_config import configure_logging
from normalizers.field_names import deduplicate_column_keys
from sources.match_store import MatchStore
from sources.sheets_client import SheetsClient
from store.merged_data import MergedDataService

logger = logging.getLogger(__name__)

SERVICE_NAME = "sideline-api"


def _safe_int(value: Any, default: int | None = None) -> int | None:
    try:
        if value is None or value == "":
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def build_service(settings: Settings) -> MergedDataService:
    """Production wiring: spreadsheet client + database store. Used by the API and the CLI."""
    sheets = SheetsClient(
        spreadsheet_id=settings.spreadsheet_id,
        api_key=settings.sheets_api_key,
        timeout=settings.sheets_timeout_seconds,
        default_range=settings.sheets_range,
    )
    store = MatchStore.from_url(settings.database_url)
    return MergedDataService(sheets, store, logger=logging.getLogger("sideline.merge"))


def _load_kwargs(source: dict[str, Any]) -> dict[str, Any]:
    """Source-level filters shared by the merged-data and render endpoints."""
    team_ids = source.get("team_ids")
    if isinstance(team_ids, str):
        team_ids = [t for t in (_safe_int(p) for p in team_ids.split(",")) if t is not None]
    elif isinstance(team_ids, list):
        team_ids = [t for t in (_safe_int(p) for p in team_ids) if t is not None]
    else:
        team_ids = None

    return {
        "sheet_range": source.get("range") or None,
        "team_id": _safe_int(source.get("team_id")),
        "team_ids": team_ids or None,
        "start_date": source.get("start_date") or None,
        "end_date": source.get("end_date") or None,
    }


def create_app(service: MergedDataService | None = None, settings: Settings | None = None) -> Flask:
    settings = settings or get_settings()
    app = Flask(__name__)

    if service is None:
        configure_logging(SERVICE_NAME, settings.environment, settings.log_level)
        service = build_service(settings)

    assembler = ChartDataAssembler(logger=logging.getLogger("sideline.charts"))
    cors_origin = settings.cors_origin

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = cors_origin
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        return response

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/matches/merged", methods=["GET"])
    def get_merged_matches():
        dataset = service.load(**_load_kwargs(request.args.to_dict()))
        deduplicate = request.args.get("deduplicate", "").lower() in ("1", "true", "yes")
        return jsonify(dataset.to_dict(deduplicate=deduplicate))

    @app.route("/api/columns", methods=["GET"])
    def get_columns():
        dataset = service.load(**_load_kwargs(request.args.to_dict()))
        return jsonify({"columns": deduplicate_column_keys(dataset.records)})

    @app.route("/api/sheets/metadata", methods=["GET"])
    def get_sheet_metadata():
        fetch_metadata = getattr(service.sheet_source, "fetch_column_metadata", None)
        if fetch_metadata is None:
            return jsonify({"metadata": {}})
        cell_range = request.args.get("range") or "Metadata!A1:Z200"
        return jsonify({"metadata": fetch_metadata(cell_range)})

    @app.route("/api/charts/validate", methods=["POST", "OPTIONS"])
    def validate_chart():
        if request.method == "OPTIONS":
            return ("", 204)

        payload = request.get_json(silent=True) or {}
        try:
            ChartConfig.from_dict(payload.get("config"))
        except ConfigurationError as e:
            return jsonify({"valid": False, "error": str(e)}), 400
        return jsonify({"valid": True})

    @app.route("/api/charts/render", methods=["POST", "OPTIONS"])
    def render_chart():
        if request.method == "OPTIONS":
            return ("", 204)

        payload = request.get_json(silent=True) or {}
        try:
            config = ChartConfig.from_dict(payload.get("config"))
            if payload.get("filters"):
                config = config.with_filters(ChartFilters.from_dict(payload["filters"]))
        except ConfigurationError as e:
            return jsonify({"error": str(e)}), 400

        dataset = service.load(**_load_kwargs(payload))
        chart = assembler.assemble(dataset.records, config)
        return jsonify(chart.to_dict())

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=False)

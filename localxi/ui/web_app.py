"""
Web application module for the Local XI lineup manager.

This module contains the Flask web server that serves the HTML interface
and provides JSON API endpoints for formations and matchday lineups.
"""
import logging
import os
from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request, send_from_directory

from ..models import (
    FormationPresets, LineupSlotState, LineupValidationError, PlayerMatchStat
)
from ..services import GatewayError, LineupEngine, ServiceFactory, merge_slots
from ..utils.config import LineupConfig

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Services are created through the service factory so tests can inject a
    configuration or a different gateway.
    """

    def __init__(self, config: Optional[LineupConfig] = None):
        self.service_factory = ServiceFactory(config)
        self.config = self.service_factory.config
        self.catalog = self.service_factory.get_catalog()
        self.lineup_service = self.service_factory.create_lineup_service()


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _raw_text(value: Any) -> Optional[str]:
    # numbers posted as JSON go through the same parser as typed input
    if value is None:
        return None
    return str(value)


def create_app(config: Optional[LineupConfig] = None, static_folder: Optional[str] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        config: Lineup configuration (environment by default)
        static_folder: Directory to serve static files from

    Returns:
        Configured Flask application instance
    """
    static_folder = static_folder or os.getcwd()
    app = Flask(__name__, static_folder=static_folder, static_url_path="")
    app_state = WebAppState(config)
    app.extensions["localxi"] = app_state

    @app.route("/")
    def index():
        """Serve the main HTML interface."""
        response = send_from_directory(static_folder, "index.html")
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        return response

    # ==================== Helpers ==================== #

    def _build_lineup_data(engine: LineupEngine) -> Dict[str, Any]:
        """Build the merged lineup plus every derived view the editor renders."""
        template = engine.template
        labels = {slot.slot_id: slot.label for slot in template.slots} if template else {}
        analytics = app_state.lineup_service.analytics(engine)
        report = analytics.generate_report()

        return {
            "lineup": engine.lineup.to_dict(labels),
            "formation": template.to_dict() if template else None,
            "eligible": {
                slot_id: [asdict(option) for option in engine.eligible_players_for(slot_id)]
                for slot_id in engine.lineup.slot_order
            },
            "bench": [player.to_dict() for player in engine.bench()],
            "report": asdict(report),
            "pitch": [position.to_dict() for position in app_state.lineup_service.pitch(engine)],
            "selection": {
                "armedPlayerId": engine.armed_player_id,
                "selectedSlotId": engine.selected_slot_id,
            },
        }

    def _apply_posted_state(engine: LineupEngine, data: Dict[str, Any]) -> None:
        """
        Replace the engine's working state with a lineup posted by the client.

        Everything posted is parsed before the engine is touched, so a
        rejected payload leaves the session as it was.
        """
        target = engine.template
        formation_id = _int_or_none(data.get("formationId"))
        if formation_id is not None and formation_id != engine.lineup.formation_id:
            target = app_state.catalog.get_formation(formation_id)
            if target is None:
                raise LineupValidationError(f"Formation {formation_id} not found.")

        posted_slots = None
        if "slots" in data:
            posted_slots = [LineupSlotState.from_dict(raw) for raw in data.get("slots") or []]

        posted_stats = None
        if "playerStats" in data:
            posted_stats = [PlayerMatchStat.from_dict(raw) for raw in data.get("playerStats") or []]

        if target is not None and target is not engine.template:
            engine.change_formation(target)
        if posted_slots is not None and engine.template is not None:
            engine.lineup.slots = merge_slots(engine.template, posted_slots)
        if posted_stats is not None:
            engine.lineup.player_stats = {stat.player_id: stat for stat in posted_stats}

    def _apply_action(engine: LineupEngine, data: Dict[str, Any]) -> None:
        """Dispatch one editor interaction to the engine."""
        action = (data.get("action") or "").strip()
        slot_id = data.get("slotId")

        if action == "assign":
            engine.assign(slot_id, _int_or_none(data.get("playerId")))
        elif action == "captain":
            engine.set_captain(slot_id)
        elif action == "rating":
            engine.set_rating(slot_id, _raw_text(data.get("value")))
        elif action == "stat":
            engine.record_stat(int(data["playerId"]), data.get("field", ""), _raw_text(data.get("value")))
        elif action == "swap":
            engine.swap_slots(slot_id, data.get("otherSlotId"))
        elif action == "bench":
            engine.assign_bench_player(int(data["playerId"]), slot_id)
        elif action == "arm":
            engine.arm_bench_player(int(data["playerId"]))
        elif action == "click":
            engine.click_slot(slot_id)
        elif action == "clear":
            engine.clear_selection()
        else:
            raise LineupValidationError(f"Unknown action '{action}'.")

    # ==================== Formation Endpoints ==================== #

    @app.route("/api/formations", methods=["GET"])
    def list_formations():
        """Get all formations ordered by name."""
        try:
            return jsonify({
                "success": True,
                "formations": [f.to_dict() for f in app_state.catalog.list_formations()],
            })
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/formations/presets", methods=["GET"])
    def list_presets():
        """Get the shapes that have hand-labelled presets."""
        return jsonify({"success": True, "presets": FormationPresets.names()})

    @app.route("/api/formations", methods=["POST"])
    def create_formation():
        """Create a formation from a shape string or a preset."""
        try:
            data = request.get_json() or {}
            if data.get("preset"):
                formation = app_state.catalog.add_preset(data["preset"], data.get("name"))
            else:
                formation = app_state.catalog.add_formation(data.get("name", ""), data.get("shape", ""))
            return jsonify({"success": True, "formation": formation.to_dict()}), 201
        except LineupValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/formations/<int:formation_id>/slots/<slot_id>", methods=["PUT"])
    def rename_formation_slot(formation_id: int, slot_id: str):
        """Relabel one slot; its id and the slot count never change."""
        try:
            data = request.get_json() or {}
            if app_state.catalog.get_formation(formation_id) is None:
                return jsonify({"success": False, "error": "Formation not found"}), 404
            formation = app_state.catalog.rename_slot(formation_id, slot_id, data.get("label", ""))
            return jsonify({"success": True, "formation": formation.to_dict()})
        except LineupValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Roster Endpoints ==================== #

    @app.route("/api/players", methods=["GET"])
    def list_players():
        """Get the roster ordered by shirt number."""
        try:
            return jsonify({
                "success": True,
                "players": [p.to_dict() for p in app_state.catalog.list_players()],
            })
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Lineup Endpoints ==================== #

    @app.route("/api/lineups/match/<int:match_id>", methods=["GET"])
    def get_lineup(match_id: int):
        """Load a match's lineup merged into its formation, with derived views."""
        try:
            reload = request.args.get("reload") == "1"
            engine = app_state.lineup_service.open_session(match_id, reload=reload)
            return jsonify({"success": True, **_build_lineup_data(engine)})
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/lineups/match/<int:match_id>/actions", methods=["POST"])
    def lineup_action(match_id: int):
        """Apply one editing interaction (assign, captain, rating, stat, swap, ...)."""
        try:
            data = request.get_json() or {}
            engine = app_state.lineup_service.open_session(match_id)
            _apply_action(engine, data)
            return jsonify({"success": True, **_build_lineup_data(engine)})
        except (LineupValidationError, KeyError, ValueError, TypeError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/lineups/match/<int:match_id>/formation", methods=["POST"])
    def change_lineup_formation(match_id: int):
        """Switch a match to another formation, keeping players on shared slot ids."""
        try:
            data = request.get_json() or {}
            engine = app_state.lineup_service.change_formation(match_id, int(data["formationId"]))
            return jsonify({"success": True, **_build_lineup_data(engine)})
        except (LineupValidationError, KeyError, ValueError, TypeError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/lineups/match/<int:match_id>", methods=["PUT"])
    def save_lineup(match_id: int):
        """Save a match lineup, optionally replacing the working state with the posted one."""
        try:
            data = request.get_json(silent=True) or {}
            engine = app_state.lineup_service.open_session(match_id)
            _apply_posted_state(engine, data)

            result = app_state.lineup_service.save(match_id)
            if not result.success:
                return jsonify({"success": False, "error": result.error}), 400
            return jsonify({
                "success": True,
                "message": "Lineup saved",
                "lineup": result.lineup.to_dict(),
            })
        except (LineupValidationError, KeyError, ValueError, TypeError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            logger.error("Saving lineup for match %s failed: %s", match_id, e)
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/lineups/match/<int:match_id>/report.csv", methods=["GET"])
    def lineup_report_csv(match_id: int):
        """Download the lineup stats table as CSV."""
        try:
            engine = app_state.lineup_service.open_session(match_id)
            csv_text = app_state.lineup_service.analytics(engine).generate_report_csv()
            return Response(
                csv_text,
                mimetype="text/csv",
                headers={"Content-Disposition": f"attachment; filename=lineup_match_{match_id}.csv"},
            )
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/lineups/summaries", methods=["POST"])
    def lineup_summaries():
        """Get ``{matchId, formationId}`` for each of the given matches that has a lineup."""
        try:
            data = request.get_json() or {}
            match_ids = [int(m) for m in data.get("matchIds") or []]
            gateway = app_state.service_factory.get_gateway()
            return jsonify({"success": True, "summaries": gateway.lineup_summaries(match_ids)})
        except (ValueError, TypeError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    # ==================== Player Stats Endpoints ==================== #

    @app.route("/api/player-stats/<int:player_id>/totals", methods=["GET"])
    def player_stat_totals(player_id: int):
        """Get a player's goals, assists and cards summed over every saved lineup."""
        try:
            totals = app_state.lineup_service.player_totals(player_id)
            return jsonify({"success": True, "totals": totals})
        except GatewayError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    return app


def run_web_app(host: Optional[str] = None, port: Optional[int] = None, static_folder: Optional[str] = None) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (configuration default: localhost only)
        port: Port number to listen on
        static_folder: Directory containing static files (HTML, CSS, JS)
    """
    config = LineupConfig.from_env()
    app = create_app(config, static_folder)
    app.run(host=host or config.host, port=port or config.port, debug=False)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_web_app()

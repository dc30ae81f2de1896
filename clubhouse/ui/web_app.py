"""
Web application module for the Clubhouse team manager.

This module contains the Flask server exposing the core operations as a JSON
API for the app's screens. Error kinds from the services are turned into
user-facing text here and nowhere else.
"""
import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..models import ErrorKind, InviteReleaseOption, PaymentEntry
from ..services import ServiceFactory, PersistenceService, GAME, EVENT
from ..utils import EMAIL, SPORT_NAMES, AppConfig, classify_identifier, new_id, parse_iso, to_iso
from .messages import error_message

logger = logging.getLogger(__name__)

_KINDS = {"games": GAME, "events": EVENT}


class WebAppState:
    """
    Holds the services a running web app works with.

    All services share the single store built by the factory.
    """

    def __init__(self, factory: ServiceFactory):
        services = factory.create_complete_service_suite()
        self.store = services['store']
        self.auth = services['auth']
        self.switcher = services['switcher']
        self.invites = services['invites']
        self.ledger = services['ledger']
        self.mailbox = services['mailbox']
        self.sync = services['sync']

    def push_active_team(self) -> None:
        """Share the active team with the sync service, when one is configured."""
        if self.sync is None or self.store.active_team is None:
            return
        result = self.sync.push(PersistenceService.build_snapshot(self.store.state))
        if not result.success:
            logger.warning("Team %s was not pushed: %s", result.team_id, result.detail)


def _body() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _failure(error, identifier: Optional[str] = None, status: int = 400):
    kind = classify_identifier(identifier)[0] if identifier else EMAIL
    return jsonify({
        "success": False,
        "error": error.value if error else None,
        "message": error_message(error, kind),
    }), status


def create_app(factory: Optional[ServiceFactory] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        factory: Service factory to build services from (configured from
            the environment by default)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(factory or ServiceFactory())
    app.extensions["clubhouse"] = app_state

    # ==================== Session ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Summary of the session and active team."""
        state = app_state.store.state
        team = state.active_team
        player = state.current_player
        return jsonify({
            "success": True,
            "is_logged_in": state.is_logged_in,
            "active_team_id": state.active_team_id,
            "team_name": team.team_name if team else None,
            "sport": team.settings.sport if team else None,
            "current_player_id": player.id if player else None,
            "current_player_name": player.full_name if player else None,
            "is_admin": app_state.auth.is_admin(),
            "can_manage_team": app_state.auth.can_manage_team(),
            "pending_team_ids": (
                state.pending_selection.team_ids if state.pending_selection else None
            ),
            "unread_notifications": app_state.mailbox.unread_count(),
            "unread_chat": app_state.mailbox.unread_chat_count(player.id) if player else 0,
        })

    @app.route("/api/login", methods=["POST"])
    def login():
        data = _body()
        identifier = data.get("identifier", "")
        result = app_state.auth.login(identifier, data.get("secret", ""))
        if not result.success:
            return _failure(result.error, identifier, status=401)
        return jsonify({
            "success": True,
            "player_id": result.player_id,
            "multiple_teams": result.multiple_teams,
            "team_count": result.team_count,
        })

    @app.route("/api/logout", methods=["POST"])
    def logout():
        app_state.auth.logout()
        return jsonify({"success": True})

    @app.route("/api/register/admin", methods=["POST"])
    def register_admin():
        data = _body()
        result = app_state.auth.register_admin(
            name=data.get("name", ""),
            email=data.get("email", ""),
            secret=data.get("secret", ""),
            team_name=data.get("team_name", ""),
            sport=data.get("sport", "hockey"),
            phone=data.get("phone"),
            jersey_number=data.get("jersey_number"),
            is_coach=bool(data.get("is_coach", False)),
        )
        if not result.success:
            return _failure(result.error, data.get("email"))
        app_state.push_active_team()
        return jsonify({"success": True, "player_id": result.player_id, "team_id": result.team_id})

    @app.route("/api/register/invited", methods=["POST"])
    def register_invited():
        data = _body()
        identifier = data.get("identifier", "")
        result = app_state.auth.register_invited_player(identifier, data.get("secret", ""))
        if not result.success:
            return _failure(result.error, identifier)
        app_state.push_active_team()
        return jsonify({"success": True, "player_id": result.player_id, "team_id": result.team_id})

    # ==================== Teams ==================== #

    @app.route("/api/teams", methods=["GET"])
    def list_teams():
        teams = app_state.switcher.teams_for_user()
        return jsonify({
            "success": True,
            "teams": [
                {"id": t.id, "team_name": t.team_name, "sport": t.settings.sport,
                 "sport_name": SPORT_NAMES.get(t.settings.sport, t.settings.sport)}
                for t in teams
            ],
        })

    @app.route("/api/teams/switch", methods=["POST"])
    def switch_team():
        if not app_state.switcher.switch_team(_body().get("team_id", "")):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True})

    @app.route("/api/teams/select", methods=["POST"])
    def select_team():
        if not app_state.switcher.select_pending_team(_body().get("team_id", "")):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True})

    @app.route("/api/teams/join", methods=["POST"])
    def join_team():
        """Download a team from the sync service and store it locally."""
        team_id = _body().get("team_id", "")
        if app_state.sync is None:
            return jsonify({"success": False, "error": "sync_disabled"}), 503
        result = app_state.sync.download(team_id)
        if not result.success:
            return _failure(result.error, status=502 if result.error == ErrorKind.SYNC_FAILED else 404)
        if not app_state.switcher.import_snapshot(result.snapshot, team_id):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True, "team_id": team_id})

    # ==================== Invitations ==================== #

    @app.route("/api/invites/sweep", methods=["POST"])
    def sweep_invites():
        released = app_state.invites.sweep()
        return jsonify({"success": True, "released": [item.id for item in released]})

    @app.route("/api/<collection>/<item_id>/invitees", methods=["POST"])
    def add_invitees(collection, item_id):
        kind = _KINDS.get(collection)
        if kind is None:
            return jsonify({"success": False, "error": "not_found"}), 404
        player_ids = _body().get("player_ids", [])
        if not isinstance(player_ids, list) or not all(isinstance(pid, str) for pid in player_ids):
            return jsonify({"success": False, "error": "player_ids must be a list of player ids"}), 400
        emitted = app_state.invites.add_invitees(kind, item_id, player_ids)
        return jsonify({"success": True, "notified": [n.to_player_id for n in emitted]})

    @app.route("/api/<collection>/<item_id>/release", methods=["POST"])
    def set_release(collection, item_id):
        kind = _KINDS.get(collection)
        if kind is None:
            return jsonify({"success": False, "error": "not_found"}), 404
        data = _body()
        try:
            option = InviteReleaseOption(data.get("option"))
            release_date = parse_iso(data.get("release_date"))
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        result = app_state.invites.set_release_option(kind, item_id, option, release_date)
        if not result.success:
            return _failure(result.error)
        return jsonify({"success": True, "notified": [n.to_player_id for n in result.notifications]})

    # ==================== Payments ==================== #

    @app.route("/api/payments/<period_id>/entries", methods=["POST"])
    def add_payment_entry(period_id):
        data = _body()
        try:
            entry = PaymentEntry(
                id=data.get("id") or new_id(),
                amount=float(data["amount"]),
                date=data.get("date", ""),
                note=data.get("note"),
            )
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid payment entry: {e}"}), 400
        if not app_state.ledger.add_payment_entry(period_id, data.get("player_id", ""), entry):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True, "entry_id": entry.id})

    @app.route("/api/payments/<period_id>/players/<player_id>/entries/<entry_id>", methods=["DELETE"])
    def remove_payment_entry(period_id, player_id, entry_id):
        if not app_state.ledger.remove_payment_entry(period_id, player_id, entry_id):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True})

    @app.route("/api/payments/<period_id>/summary", methods=["GET"])
    def payment_summary(period_id):
        team = app_state.store.active_team
        period = team.find_payment_period(period_id) if team else None
        if period is None:
            return jsonify({"success": False, "error": "not_found"}), 404
        summary = app_state.ledger.period_summary(period)
        players = [
            {
                "player_id": payment.player_id,
                "status": app_state.ledger.effective_status(period, payment).value,
                "paid": payment.amount,
                "balance_due": app_state.ledger.balance_due(period, payment.player_id),
                "paid_at": to_iso(payment.paid_at),
            }
            for payment in period.player_payments
        ]
        return jsonify({
            "success": True,
            "title": period.title,
            "amount": period.amount,
            "paid": summary.paid,
            "partial": summary.partial,
            "unpaid": summary.unpaid,
            "collected": summary.collected,
            "outstanding": summary.outstanding,
            "players": players,
        })

    # ==================== Mailbox ==================== #

    @app.route("/api/mailbox/unread", methods=["GET"])
    def unread_counts():
        player_id = request.args.get("player_id") or app_state.store.state.current_player_id
        if not player_id:
            return jsonify({"success": False, "error": "not_logged_in"}), 400
        return jsonify({
            "success": True,
            "notifications": app_state.mailbox.unread_count(player_id),
            "chat": app_state.mailbox.unread_chat_count(player_id),
        })

    @app.route("/api/mailbox/notifications/<notification_id>/read", methods=["POST"])
    def mark_notification_read(notification_id):
        if not app_state.mailbox.mark_notification_read(notification_id):
            return jsonify({"success": False, "error": "not_found"}), 404
        return jsonify({"success": True})

    @app.route("/api/chat/read", methods=["POST"])
    def mark_chat_read():
        player_id = _body().get("player_id") or app_state.store.state.current_player_id
        if not player_id:
            return jsonify({"success": False, "error": "not_logged_in"}), 400
        moved = app_state.mailbox.mark_chat_read(player_id)
        return jsonify({"success": True, "moved": moved})

    return app


def run_web_app(config: Optional[AppConfig] = None) -> None:
    """
    Run the web application.

    Args:
        config: Application settings (read from the environment by default)
    """
    config = config or AppConfig.from_env()
    app = create_app(ServiceFactory(config))
    logger.info("Serving %s on %s:%d", config.data_file, config.host, config.port)
    app.run(host=config.host, port=config.port, debug=False)

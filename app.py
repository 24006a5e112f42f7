# app.py
"""
Flask entrypoint for the NFL rivalry dashboard.

Routes:
  HTML:
    - /rivalry?teamA=...&teamB=...        (bookmarkable matchup view)

  JSON:
    - /api/teams
    - /api/rivalry?teamA=...&teamB=...
    - /api/games                          (raw CSV)
    - /api/squares                        (GET current / POST create / DELETE reset)
    - /api/squares/cells                  (PUT one cell)
    - /api/squares/bulk                   (POST names)
    - /api/squares/wager                  (PUT wager)
    - /api/squares/payouts?wager=N
    - /api/squares/refresh                (POST fetch scores now)
    - /api/squares/tracking               (POST start / DELETE stop polling)

  Auth:
    - /auth/login, /auth/logout

Query parameters (rivalry):
  - teamA / teamB: franchise names; historical names are mapped to the current franchise
  - recent=N (recent-games window)
  - types=regular,playoff (timeline filter)

Notes:
  - Everything except /health and /auth/* needs a session or a bearer token.
  - Unauthenticated calls answer 401, a missing dataset answers 503.
"""

from __future__ import annotations

import atexit
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, Response, jsonify, render_template, request, session, url_for

from nfl_rivalry import squares
from nfl_rivalry.auth import SESSION_USER_KEY, AuthGate, login_required
from nfl_rivalry.cache import TTLCache
from nfl_rivalry.config import AppConfig
from nfl_rivalry.errors import RivalryError
from nfl_rivalry.espn_client import ESPNClient
from nfl_rivalry.franchises import normalize_name
from nfl_rivalry.handlers.rivalry_handler import RivalryHandler
from nfl_rivalry.log import configure_logging
from nfl_rivalry.services import RivalryService, ScoresService, SquaresService
from nfl_rivalry.store import SquaresStore

logger = logging.getLogger(__name__)


def create_app(cfg: Optional[AppConfig] = None, espn_client: Optional[ESPNClient] = None) -> Flask:
    """
    App factory.

    Builds shared dependencies (cache, dataset service, score client, squares
    service) once per process. Tests pass their own config and a fake client.
    """
    cfg = cfg or AppConfig()
    configure_logging(cfg.log_level)

    cache = TTLCache()
    client = espn_client or ESPNClient(cfg.espn_api_base)

    rivalry_service = RivalryService(cache=cache, csv_path=cfg.data_csv_path, data_ttl=cfg.data_cache_ttl_seconds)
    scores = ScoresService(client=client, cache=cache, scoreboard_ttl=cfg.scoreboard_cache_ttl_seconds)
    squares_service = SquaresService(
        store=SquaresStore(cfg.squares_store_path),
        scores=scores,
        poll_interval=cfg.poll_interval_seconds,
    )
    handler = RivalryHandler(
        rivalry_service=rivalry_service,
        recent_limit=cfg.limit_recent,
        blowout_limit=cfg.limit_blowouts,
    )
    gate = AuthGate(cfg.auth_tokens)

    # No orphaned poll threads at interpreter exit.
    atexit.register(squares_service.shutdown)

    app = Flask(__name__)
    app.secret_key = cfg.secret_key
    app.extensions["nfl_rivalry"] = {
        "config": cfg,
        "rivalry": rivalry_service,
        "squares": squares_service,
        "scores": scores,
    }

    auth_required = login_required(gate)

    # -------------------------
    # Errors
    # -------------------------

    @app.errorhandler(RivalryError)
    def handle_rivalry_error(e: RivalryError):
        """Map domain errors to JSON with their status code."""
        if e.status_code >= 500:
            logger.warning("%s: %s", type(e).__name__, e.message)
        return jsonify({"error": e.message}), e.status_code

    # -------------------------
    # Shared parsing helpers
    # -------------------------

    def parse_int(name: str, default: int) -> int:
        """Parse an integer query param with default fallback."""
        try:
            return int(request.args.get(name, default))
        except Exception:
            return default

    def parse_teams() -> Tuple[str, str]:
        """Read ?teamA=...&teamB=... and map historical names to current franchises."""
        a = (request.args.get("teamA") or "").strip()
        b = (request.args.get("teamB") or "").strip()
        return (normalize_name(a) if a else ""), (normalize_name(b) if b else "")

    def parse_types() -> Tuple[bool, bool]:
        """
        Parse ?types=regular,playoff for the timeline.

        Missing or empty => both types.
        """
        raw = (request.args.get("types") or "").strip().lower()
        if not raw:
            return True, True
        parts = {p.strip() for p in raw.split(",") if p.strip()}
        return "regular" in parts, "playoff" in parts

    def json_body() -> Dict[str, Any]:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def share_url(team_a: str, team_b: str) -> str:
        return url_for("rivalry_page", teamA=team_a, teamB=team_b, _external=True)

    # -------------------------
    # Serialization
    # -------------------------

    def rivalry_to_dict(vm) -> Dict[str, Any]:
        """Serialize a RivalryViewModel into JSON-safe primitives."""
        return {
            "teamA": vm.team_a,
            "teamB": vm.team_b,
            "colorsA": vm.colors_a,
            "colorsB": vm.colors_b,
            "games": vm.games,
            "record": vm.record.to_dict(),
            "byType": {k: r.to_dict() for k, r in vm.by_type.items()},
            "byDay": [{"day": day, **r.to_dict()} for day, r in vm.by_day],
            "blowouts": [g.to_dict() for g in vm.blowouts],
            "streaks": vm.streaks.to_dict(),
            "recent": [g.to_dict() for g in vm.recent],
            "recentForm": {
                "games": vm.recent_form.games,
                "aWins": vm.recent_form.a_wins,
                "bWins": vm.recent_form.b_wins,
                "ties": vm.recent_form.ties,
            },
            "timeline": [p.to_dict() for p in vm.timeline],
            "leader": vm.leader,
            "shareText": vm.share_text,
            "shareUrl": share_url(vm.team_a, vm.team_b),
        }

    # -------------------------
    # Auth
    # -------------------------

    @app.post("/auth/login")
    def auth_login():
        """
        Exchange an access token for a session.

        Body: {"token": "...", "user": "display name (optional)"}
        """
        body = json_body()
        token = body.get("token")
        if not isinstance(token, str) or not gate.token_valid(token):
            return jsonify({"error": "Authentication required"}), 401

        user = body.get("user")
        session[SESSION_USER_KEY] = user.strip() if isinstance(user, str) and user.strip() else "user"
        return jsonify({"ok": True, "user": session[SESSION_USER_KEY]})

    @app.post("/auth/logout")
    def auth_logout():
        session.pop(SESSION_USER_KEY, None)
        return jsonify({"ok": True})

    # -------------------------
    # Rivalry routes
    # -------------------------

    @app.get("/rivalry")
    @auth_required
    def rivalry_page():
        """
        Matchup page.

        Query:
          - teamA, teamB (optional; without both the page shows the team list)
        """
        team_a, team_b = parse_teams()
        teams = rivalry_service.team_options()

        if not team_a or not team_b:
            return render_template("rivalry.html", teams=teams, vm=None, team_a=team_a, team_b=team_b)

        ctx = handler.build_context(team_a, team_b)
        return render_template(
            "rivalry.html",
            teams=teams,
            vm=ctx,
            team_a=team_a,
            team_b=team_b,
            share_url=share_url(team_a, team_b),
        )

    @app.get("/api/teams")
    @auth_required
    def api_teams():
        """Team picker list: current franchises first, then historical clubs."""
        return jsonify({"teams": rivalry_service.team_options()})

    @app.get("/api/rivalry")
    @auth_required
    def api_rivalry():
        """
        Full matchup JSON payload.

        Query:
          - teamA, teamB (required)
          - recent=N
          - types=regular,playoff
        """
        team_a, team_b = parse_teams()
        if not team_a or not team_b:
            return jsonify({"error": "teamA and teamB are required"}), 400

        include_regular, include_playoff = parse_types()
        vm = handler.build(
            team_a,
            team_b,
            recent_limit=max(parse_int("recent", cfg.limit_recent), 0),
            include_regular=include_regular,
            include_playoff=include_playoff,
        )
        return jsonify(rivalry_to_dict(vm))

    @app.get("/api/games")
    @auth_required
    def api_games():
        """The raw dataset CSV."""
        csv_text = rivalry_service.read_raw_csv()
        resp = Response(csv_text, mimetype="text/csv")
        resp.headers["Cache-Control"] = "private, max-age=3600"
        return resp

    # -------------------------
    # Squares routes
    # -------------------------

    @app.get("/api/squares")
    @auth_required
    def api_squares_state():
        return jsonify(squares_service.state())

    @app.post("/api/squares")
    @auth_required
    def api_squares_create():
        """
        Create a new pool (replaces any existing one).

        Body: {"teamA": "...", "teamB": "...", "wager": 1}
        """
        body = json_body()
        squares_service.create(body.get("teamA") or "", body.get("teamB") or "", body.get("wager", 1))
        return jsonify(squares_service.state()), 201

    @app.delete("/api/squares")
    @auth_required
    def api_squares_reset():
        squares_service.reset()
        return jsonify(squares_service.state())

    @app.put("/api/squares/cells")
    @auth_required
    def api_squares_cell():
        """Body: {"row": 0-9, "col": 0-9, "name": "..."}"""
        body = json_body()
        squares_service.assign(body.get("row"), body.get("col"), str(body.get("name") or ""))
        return jsonify(squares_service.state())

    @app.post("/api/squares/bulk")
    @auth_required
    def api_squares_bulk():
        """
        Fill the grid row by row.

        Body: {"names": ["...", ...]} or {"text": "a, b\\nc"}
        """
        body = json_body()
        names: List[str]
        if isinstance(body.get("names"), list):
            names = [n for n in body["names"] if isinstance(n, str)]
        else:
            names = squares.parse_bulk_names(str(body.get("text") or ""))

        written = squares_service.bulk(names)
        out = squares_service.state()
        out["written"] = written
        return jsonify(out)

    @app.put("/api/squares/wager")
    @auth_required
    def api_squares_wager():
        squares_service.set_wager(json_body().get("wager"))
        return jsonify(squares_service.state())

    @app.get("/api/squares/payouts")
    @auth_required
    def api_squares_payouts():
        """Payout table for ?wager=N (defaults to the current pool's wager, else 1)."""
        game = squares_service.current()
        raw = request.args.get("wager")
        wager = squares.validate_wager(raw if raw is not None else (game.wager if game else 1))
        return jsonify(squares.calculate_payouts(wager))

    @app.post("/api/squares/refresh")
    @auth_required
    def api_squares_refresh():
        """Fetch live scores now and record any new winners."""
        result = squares_service.refresh()
        out = squares_service.state()
        out.update(result.to_dict())
        return jsonify(out)

    @app.post("/api/squares/tracking")
    @auth_required
    def api_squares_tracking_start():
        started = squares_service.start_tracking()
        out = squares_service.state()
        out["started"] = started
        return jsonify(out)

    @app.delete("/api/squares/tracking")
    @auth_required
    def api_squares_tracking_stop():
        squares_service.stop_tracking()
        return jsonify(squares_service.state())

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True}

    return app


if __name__ == "__main__":
    # Dev server (not for production).
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)

"""HTTP API for the daily score board.

    GET  /health                           {"ok": true}
    POST /api/score                        {twitter, wallet, score} -> {"ok", "entry"}
    GET  /api/leaderboard/daily?date=      {"date", "leaderboard"}
    GET  /api/winners                      {date: entry}
    POST /api/winners/compute              {"ok", "winners"}

Run with `virgen-jump-server` (or `python -m runner.server`); PORT defaults
to 3000 and scores live under RUNNER_DATA_DIR.
"""

from __future__ import annotations

import os

from flask import Flask, jsonify, request

from runner.logger import get_logger
from runner.scoreboard import InvalidScoreError, ScoreService, ScoreStoreError

log = get_logger("server")

DEFAULT_PORT = 3000


def create_app(data_dir: str | None = None, service: ScoreService | None = None) -> Flask:
    if service is None:
        from runner.settings import DATA_DIR

        service = ScoreService.from_data_dir(data_dir or DATA_DIR)

    app = Flask(__name__)
    app.config["SCORE_SERVICE"] = service

    @app.errorhandler(InvalidScoreError)
    def _invalid_score(e):
        return jsonify({"error": "Invalid score"}), 400

    @app.errorhandler(ScoreStoreError)
    def _store_failed(e):
        log.error("storage failure:", e)
        return jsonify({"error": "Storage failure"}), 500

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True})

    @app.route("/api/score", methods=["POST"])
    def submit_score():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        entry = service.submit_score(data.get("twitter"), data.get("wallet"), data.get("score"))
        return jsonify({"ok": True, "entry": entry.to_dict()})

    @app.route("/api/leaderboard/daily", methods=["GET"])
    def daily_leaderboard():
        return jsonify(service.daily_leaderboard(request.args.get("date")))

    @app.route("/api/winners", methods=["GET"])
    def winners():
        return jsonify(service.winners())

    @app.route("/api/winners/compute", methods=["POST"])
    def compute_winners():
        return jsonify({"ok": True, "winners": service.compute_winners()})

    return app


def main():
    port = int(os.environ.get("PORT", DEFAULT_PORT))
    app = create_app()
    log.info(f"Virgen Jump server running on http://localhost:{port}")
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":  # pragma: no cover
    main()

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from anistream.config import TRENDING_LIMIT
from anistream.errors import ExtractionError, NotFoundError
from anistream.models import VideoServer
from anistream.service import AnimeService

logger = logging.getLogger(__name__)


def create_app(service: AnimeService | None = None) -> Flask:
    app = Flask(__name__)
    app.config["SERVICE"] = service or AnimeService()

    def svc() -> AnimeService:
        return app.config["SERVICE"]

    @app.after_request
    def allow_cors(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.route("/api/search")
    def search():
        query = request.args.get("q", "").strip()
        if not query:
            return jsonify({"query": "", "results": []})
        results = svc().search_animes(query)
        return jsonify({"query": query, "results": [a.to_dict() for a in results]})

    @app.route("/api/trending")
    def trending():
        limit = request.args.get("limit", TRENDING_LIMIT, type=int)
        return jsonify({"results": [a.to_dict() for a in svc().trending(max(limit, 0))]})

    @app.route("/api/anime/<slug>")
    def anime_detail(slug):
        try:
            info = svc().get_anime_info(slug)
        except NotFoundError as e:
            return jsonify({"error": str(e)}), 404
        except ExtractionError as e:
            return jsonify({"error": str(e)}), 502
        return jsonify(info.to_dict())

    @app.route("/api/anime/<slug>/episodes/<int:number>/servers")
    def episode_servers(slug, number):
        servers = svc().get_video_servers(slug, number)
        return jsonify({"servers": [s.to_dict() for s in servers]})

    @app.route("/api/servers/other-sources", methods=["POST"])
    def other_sources():
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("html"), str):
            return jsonify({"error": "No html provided"}), 400

        current = []
        raw_servers = data.get("servers")
        for raw in raw_servers if isinstance(raw_servers, list) else []:
            server = VideoServer.from_raw(raw) if isinstance(raw, dict) else None
            if server:
                current.append(server)
        merged = svc().find_other_sources(current, data["html"])
        return jsonify({"servers": [s.to_dict() for s in merged]})

    return app


def run(host: str = "0.0.0.0", port: int = 5000):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    app = create_app()
    logger.info("Server running on http://%s:%s", host, port)
    app.run(debug=False, host=host, port=port)


if __name__ == "__main__":
    run()

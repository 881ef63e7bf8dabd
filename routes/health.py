from flask import Blueprint, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.get("/")
def index():
    return "Clinic payment server is running", 200, {"Content-Type": "text/plain; charset=utf-8"}


@health_bp.get("/health")
def health():
    return jsonify(status="ok"), 200

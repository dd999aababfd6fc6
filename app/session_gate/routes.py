"""
Session gate routes for the login page and logout.
"""
from flask import Blueprint, flash, redirect, render_template, request, url_for

from .models import Notice
from .services import SessionGateService


def create_session_gate_routes(gate_service: SessionGateService) -> Blueprint:
    """Create session gate routes."""
    bp = Blueprint('session_gate', __name__)

    @bp.route("/auth", methods=["GET"])
    def auth_page():
        """Show the login form, or go straight to the dashboard when signed in."""
        if gate_service.get_context().is_authenticated:
            return redirect(url_for("visitor_stats.stats_dashboard"))
        return render_template("auth.html", email=gate_service.default_login_email)

    @bp.route("/auth", methods=["POST"])
    def login():
        """Run the sign-in sequence."""
        email = request.form.get("email", "").strip()
        password = request.form.get("password", "")

        if not email or not password:
            notice = Notice.error("Error", "Email and password are required")
            flash(notice.to_dict(), notice.variant)
            return render_template("auth.html", email=email), 400

        gate = gate_service.create_gate()
        result = gate.login(email, password)
        flash(result.notice.to_dict(), result.notice.variant)

        if result.admitted:
            return redirect(url_for("visitor_stats.stats_dashboard"))
        return render_template("auth.html", email=email), result.status_code

    @bp.route("/logout", methods=["POST"])
    def logout():
        """Sign out and return to the login page."""
        gate_service.logout()
        return redirect(url_for("session_gate.auth_page"))

    return bp

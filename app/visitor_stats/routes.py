"""
Visitor Stats Routes

Flask routes for the stats dashboard.
"""

from flask import Blueprint, flash, jsonify, redirect, render_template, url_for

from .services import VisitorStatsService


def create_visitor_stats_blueprint(visitor_stats_service: VisitorStatsService) -> Blueprint:
    """Create visitor stats blueprint with routes.

    Args:
        visitor_stats_service: The visitor stats service instance

    Returns:
        Flask blueprint with visitor stats routes
    """
    blueprint = Blueprint('visitor_stats', __name__)

    @blueprint.route('/', methods=['GET'])
    def stats_dashboard():
        """Main stats dashboard page."""
        with visitor_stats_service.create_view() as view:
            stats = view.snapshot
            if stats.notice:
                flash(stats.notice.to_dict(), stats.notice.variant)

            if view.redirect_to_gate:
                return redirect(url_for('session_gate.auth_page'))

            # Calculate max visit count for chart scaling
            max_count = max([bucket.count for bucket in stats.buckets] + [1])

            return render_template('stats-dashboard.html',
                                   identity=view.identity,
                                   stats=stats,
                                   max_count=max_count)

    @blueprint.route('/api/stats', methods=['GET'])
    def api_stats():
        """API endpoint for dashboard statistics."""
        with visitor_stats_service.create_view() as view:
            if view.redirect_to_gate:
                return jsonify({'error': 'not-authenticated'}), 401
            return jsonify(view.snapshot.to_dict())

    return blueprint

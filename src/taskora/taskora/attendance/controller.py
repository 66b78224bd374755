from __future__ import annotations

import csv
import io
import logging

from flask import Flask, flash, g, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import AuthorizationError, ServiceError, ValidationError
from ..core.roles import MANAGEMENT
from ..auth.gate import protected
from ..container import Container
from .service import STATUS_CSS, STATUS_LABELS, day_state

logger = logging.getLogger(__name__)

EXPORT_FIELDS = ["work_date", "user_id", "full_name", "email", "check_in", "check_out", "status", "worked"]


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance", endpoint="attendance")
    @protected("attendance")
    def attendance():
        user_id = g.auth.user_id
        today = container.clock().date()
        selected = today
        raw = request.args.get("date", "")
        if raw:
            try:
                selected = parse_iso_date(raw)
            except ValueError:
                flash("Invalid date, showing today.", "warning")

        record = service.today_record(user_id, today=today)
        context = {
            "today": today,
            "selected": selected,
            "record": record,
            "state": day_state(record).value,
            "history": service.history(user_id),
            "status_labels": STATUS_LABELS,
            "status_css": STATUS_CSS,
            "can_manage": g.auth.role in MANAGEMENT,
            "summary": None,
            "sheet": [],
            "week": [],
        }
        if context["can_manage"]:
            context["summary"] = service.daily_summary(selected)
            context["sheet"] = service.daily_sheet(selected)
            context["week"] = service.weekly_overview(selected)
        return render_template("attendance.html", active_page="attendance", **context)

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @protected("attendance")
    def attendance_check_in():
        try:
            before = service.today_record(g.auth.user_id)
            record = service.check_in(g.auth.user_id)
            if before and before.check_in_time:
                flash("You already checked in today.", "info")
            else:
                flash(f"Checked in at {record.check_in_time:%H:%M}.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("check-in failed")
            flash("Could not record your check-in. Please try again.", "danger")
        return redirect(url_for("attendance"))

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @protected("attendance")
    def attendance_check_out():
        try:
            record = service.check_out(g.auth.user_id)
            flash(f"Checked out at {record.check_out_time:%H:%M}.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("check-out failed")
            flash("Could not record your check-out. Please try again.", "danger")
        return redirect(url_for("attendance"))

    @app.route("/attendance/leave", methods=["POST"], endpoint="attendance_leave")
    @protected(MANAGEMENT)
    def attendance_leave():
        raw_date = request.form.get("work_date", "")
        try:
            work_date = parse_iso_date(raw_date)
            service.mark_leave(current_role=g.auth.role, user_id=request.form.get("user_id", ""), work_date=work_date)
            flash("Leave recorded.", "success")
        except ValueError:
            flash("Invalid date.", "warning")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("mark leave failed")
            flash("Could not record the leave.", "danger")
        return redirect(url_for("attendance", date=raw_date))

    @app.route("/attendance/export", endpoint="attendance_export")
    @protected(MANAGEMENT)
    def attendance_export():
        try:
            start = parse_iso_date(request.args.get("start", ""))
            end = parse_iso_date(request.args.get("end", ""))
            rows = service.export_rows(start_date=start, end_date=end)
        except ValueError:
            flash("Choose a valid start and end date.", "warning")
            return redirect(url_for("attendance"))
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("attendance"))

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        filename = f"attendance_{start.isoformat()}_{end.isoformat()}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

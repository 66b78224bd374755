from __future__ import annotations

import io
import logging

from flask import Flask, abort, flash, g, redirect, render_template, request, send_file, url_for

from ..auth.gate import protected
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ServiceError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.file_service

    @app.route("/files", endpoint="files")
    @protected("files")
    def files():
        term = request.args.get("q", "")
        try:
            records = service.list_files(term)
        except ServiceError:
            logger.exception("listing files failed")
            flash("Could not load files.", "danger")
            records = []
        return render_template(
            "files.html",
            active_page="files",
            files=records,
            term=term,
            is_super_admin=g.auth.role == Role.SUPER_ADMIN,
        )

    @app.route("/files/upload", methods=["POST"], endpoint="file_upload")
    @protected("files")
    def file_upload():
        upload = request.files.get("file")
        try:
            if upload is None:
                raise ValidationError("Choose a file to upload")
            service.upload(
                owner_id=g.auth.user_id,
                filename=upload.filename or "",
                data=upload.read(),
                mime_type=upload.mimetype,
                subject=request.form.get("subject", ""),
            )
            flash("File uploaded.", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("upload failed")
            flash("Upload failed. Please try again.", "danger")
        return redirect(url_for("files"))

    @app.route("/files/<int:file_id>/delete", methods=["POST"], endpoint="file_delete")
    @protected("files")
    def file_delete(file_id: int):
        try:
            service.delete(current_user_id=g.auth.user_id, current_role=g.auth.role, file_id=file_id)
            flash("File deleted.", "success")
        except (ValidationError, AuthorizationError) as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("delete file failed")
            flash("Could not delete the file.", "danger")
        return redirect(url_for("files"))

    @app.route("/files/<int:file_id>/download", endpoint="file_download")
    @protected("files")
    def file_download(file_id: int):
        try:
            return redirect(service.signed_url(file_id))
        except ValidationError as e:
            flash(str(e), "warning")
        except ServiceError:
            logger.exception("signing url failed")
            flash("Could not prepare the download.", "danger")
        return redirect(url_for("files"))

    @app.route("/files/object/<path:storage_path>", endpoint="file_object")
    def file_object(storage_path: str):
        try:
            record, data = service.open_signed(
                storage_path,
                request.args.get("expires", ""),
                request.args.get("signature", ""),
            )
        except AuthorizationError:
            abort(403)
        except ValidationError:
            abort(404)
        except ServiceError:
            logger.exception("reading object %s failed", storage_path)
            abort(502)
        return send_file(
            io.BytesIO(data),
            mimetype=record.mime_type,
            as_attachment=True,
            download_name=record.name,
        )

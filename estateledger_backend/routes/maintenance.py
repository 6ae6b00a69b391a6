from flask import Blueprint, current_app, jsonify, request

from estateledger_backend.errors import NotFound, ValidationFailed, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import MaintenanceRequest, User, ROLE_ADMIN, ROLE_SECURITY, ROLE_TENANT
from estateledger_backend.services import queries
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, roles_required

bp = Blueprint("maintenance", __name__)


@bp.get("/maintenance")
@roles_required(ROLE_ADMIN, ROLE_SECURITY)
def list_maintenance_requests():
    active_only = request.args.get("active", "").lower() in ("1", "true")
    data = queries.serialize_rows(queries.maintenance_requests(db.session, active_only=active_only))
    return jsonify(envelope(True, data=data)), 200


@bp.post("/maintenance")
@roles_required(ROLE_TENANT)
def create_maintenance_request():
    tenant_id, _, _ = current_identity()
    user = db.session.get(User, tenant_id)
    if not user or not user.room_id:
        raise ValidationFailed("You must be assigned to a room to make a request.")

    data = request.get_json(silent=True) or {}
    issue = (data.get("issue") or "").strip()
    description = (data.get("description") or "").strip()
    if not issue or not description:
        raise ValidationFailed("Issue and description are required.")

    req = MaintenanceRequest(tenant_id=user.id, room_id=user.room_id, issue=issue, description=description)
    db.session.add(req)
    db.session.commit()
    return jsonify(envelope(True, "Maintenance request submitted successfully.", data=req.serialize())), 201


@bp.patch("/maintenance/<int:request_id>")
@roles_required(ROLE_ADMIN, ROLE_SECURITY)
def update_maintenance_request(request_id):
    """Move a request forward (PENDING -> IN_PROGRESS -> COMPLETED) and/or set its priority"""
    _, role, full_name = current_identity()
    req = db.session.get(MaintenanceRequest, request_id)
    if not req:
        raise NotFound("Request not found")

    data = request.get_json(silent=True) or {}
    status = data.get("status")
    priority = data.get("priority")

    if status:
        if not req.can_transition_to(status):
            raise ValidationFailed(f"Cannot move a {req.status} request to {status}")
        req.transition_to(status)
    if priority:
        req.priority = priority
    db.session.commit()

    if role == ROLE_SECURITY and status:
        tenant = db.session.get(User, req.tenant_id)
        tenant_name = tenant.full_name if tenant else "Unknown Tenant"
        Notifier(db.session).notify_admins(
            "Maintenance Update",
            f"Maintenance for {tenant_name} marked as {status} by {full_name or 'security'}",
            "/dashboard/maintenance",
        )
        current_app.logger.info("Maintenance %s moved to %s by security", req.id, status)

    return jsonify(envelope(True, "Status updated", data=req.serialize())), 200


@bp.delete("/maintenance/<int:request_id>")
@roles_required(ROLE_ADMIN)
def delete_maintenance_request(request_id):
    req = db.session.get(MaintenanceRequest, request_id)
    if not req:
        raise NotFound("Request not found")
    db.session.delete(req)
    db.session.commit()
    return jsonify(envelope(True, "Request deleted")), 200


@bp.get("/my-maintenance")
@roles_required(ROLE_TENANT)
def my_maintenance_requests():
    tenant_id, _, _ = current_identity()
    rows = queries.maintenance_requests(db.session, tenant_id=tenant_id)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200

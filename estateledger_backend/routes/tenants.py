from flask import Blueprint, jsonify, request

from estateledger_backend.errors import NotFound, ValidationFailed, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import Room, User, ROLE_ADMIN, ROLE_TENANT
from estateledger_backend.services import accounts, queries
from estateledger_backend.utils.auth_utils import roles_required
from estateledger_backend.utils.money import to_decimal

bp = Blueprint("tenants", __name__)

# ============= ROOMS =============


@bp.get("/rooms")
@roles_required(ROLE_ADMIN)
def list_rooms():
    vacant_only = request.args.get("status") == "vacant"
    rows = queries.rooms(db.session, vacant_only=vacant_only)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200


@bp.post("/rooms")
@roles_required(ROLE_ADMIN)
def create_room():
    data = request.get_json(silent=True) or {}
    room_number = (str(data.get("room_number") or "")).strip()
    floor = (str(data.get("floor") or "")).strip()
    if not room_number or not floor or data.get("rent_amount") in (None, ""):
        raise ValidationFailed("Missing required fields")
    if Room.query.filter_by(room_number=room_number).first():
        raise ValidationFailed("Room number already exists")

    room = Room(room_number=room_number, floor=floor, rent_amount=to_decimal(data["rent_amount"], "rent_amount"))
    db.session.add(room)
    db.session.commit()
    return jsonify(envelope(True, "Room created successfully", data=room.serialize())), 201


# ============= TENANTS =============


@bp.get("/tenants")
@roles_required(ROLE_ADMIN)
def list_tenants():
    return jsonify(envelope(True, data=queries.serialize_rows(queries.tenants(db.session)))), 200


@bp.patch("/tenants/<int:tenant_id>/assign-room")
@roles_required(ROLE_ADMIN)
def assign_room(tenant_id):
    """Move a tenant into a vacant room, releasing whatever room they held before"""
    data = request.get_json(silent=True) or {}
    room_id = data.get("room_id")
    if not room_id:
        raise ValidationFailed("Room ID is required.")

    tenant = db.session.get(User, tenant_id)
    if not tenant or tenant.role != ROLE_TENANT:
        raise NotFound("Tenant not found.")
    room = db.session.get(Room, room_id)
    if not room:
        raise NotFound("Room not found.")
    if not room.is_vacant:
        raise ValidationFailed("Room is already occupied.")

    if tenant.room_id:
        old_room = db.session.get(Room, tenant.room_id)
        if old_room:
            old_room.tenant_id = None

    tenant.room_id = room.id
    room.tenant_id = tenant.id
    db.session.commit()
    return jsonify(envelope(True, "Room assigned successfully.")), 200


@bp.delete("/tenants/<int:tenant_id>")
@roles_required(ROLE_ADMIN)
def delete_tenant(tenant_id):
    accounts.delete_tenant(db.session, tenant_id)
    return jsonify(envelope(True, "Tenant and all associated data deleted successfully.")), 200


@bp.get("/admin/tenants/<int:tenant_id>")
@roles_required(ROLE_ADMIN)
def tenant_details(tenant_id):
    """Tenant profile with their room and full billing history"""
    details = queries.tenant_details(db.session, tenant_id)
    return jsonify(envelope(True, data=details.serialize())), 200

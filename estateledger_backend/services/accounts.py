"""
User accounts: creation, password changes, the admin-assisted reset flow and
tenant removal.

Tenants cannot reset their own password. They file a reset request, an admin
sees it in the queue and sets a new password, which completes the request.
"""
import logging

from estateledger_backend.errors import AuthorizationDenied, NotFound, ValidationFailed
from estateledger_backend.models import (
    MaintenanceRequest,
    Notification,
    PasswordResetRequest,
    Payment,
    RentBill,
    Room,
    User,
    UtilityBill,
    ROLE_TENANT,
)
from estateledger_backend.models.password_reset import STATUS_COMPLETED, STATUS_PENDING
from estateledger_backend.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
RESET_REQUEST_SENT = "Request sent. Admin will be notified."


def create_user(session, full_name, email, password, role, phone_number=None, lease_start=None, lease_end=None):
    full_name = (full_name or "").strip()
    email = (email or "").strip().lower()
    if not full_name or not email or not password:
        raise ValidationFailed("full_name, email and password are required")
    if session.query(User.id).filter(User.email == email).first():
        raise ValidationFailed("Email already exists")

    user = User(
        full_name=full_name,
        email=email,
        phone_number=phone_number,
        role=role,
        lease_start_date=lease_start,
        lease_end_date=lease_end,
    )
    user.set_password(password)
    session.add(user)
    session.commit()
    logger.info("Created %s account %s (%s)", role, user.id, email)
    return user


def change_password(session, user_id, old_password, new_password):
    if not old_password or not new_password:
        raise ValidationFailed("Old and new passwords are required.")
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found.")
    if not user.check_password(old_password):
        raise AuthorizationDenied("Incorrect old password.")
    user.set_password(new_password)
    session.commit()
    logger.info("User %s changed their password", user_id)
    return user


def request_admin_reset(session, email, notifier):
    """File a reset request for a tenant.

    Unknown addresses get the same answer as known ones so the endpoint does
    not reveal which emails have accounts. Returns the new request, or None.
    """
    email = (email or "").strip().lower()
    user = session.query(User).filter(User.email == email, User.role == ROLE_TENANT).first()
    if not user:
        logger.info("Password reset requested for unknown tenant email")
        return None

    pending = (
        session.query(PasswordResetRequest.id)
        .filter(PasswordResetRequest.user_id == user.id, PasswordResetRequest.status == STATUS_PENDING)
        .first()
    )
    if pending:
        raise ValidationFailed("A reset request is already pending for this user.")

    room = session.get(Room, user.room_id) if user.room_id else None
    reset = PasswordResetRequest(
        user_id=user.id,
        email=user.email,
        name=user.full_name,
        room=room.room_number if room else "N/A",
        status=STATUS_PENDING,
    )
    session.add(reset)
    session.commit()
    logger.info("Password reset request %s filed for user %s", reset.id, user.id)

    notifier.notify_admins(
        "Password Reset Requested",
        f"{reset.name} (Room {reset.room}) has asked for a password reset.",
        "/dashboard/password-requests",
    )
    return reset


def complete_reset_request(session, request_id, new_password, notifier):
    if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    reset = session.get(PasswordResetRequest, request_id)
    if not reset or reset.status == STATUS_COMPLETED:
        raise NotFound("Request not found or already completed.")
    user = session.get(User, reset.user_id)
    if not user:
        raise NotFound("Request not found or already completed.")

    with unit_of_work(session):
        user.set_password(new_password)
        reset.status = STATUS_COMPLETED
    logger.info("Password reset request %s completed for user %s", reset.id, user.id)

    notifier.notify(
        user.id,
        "Password Reset",
        "An admin has reset your password. Please log in with the new password.",
        "/login",
    )
    return reset


def delete_tenant(session, tenant_id):
    """Remove a tenant, release their room and drop every row that belongs to them."""
    tenant = session.get(User, tenant_id)
    if not tenant or tenant.role != ROLE_TENANT:
        raise NotFound("Tenant not found.")

    with unit_of_work(session):
        session.query(Room).filter(Room.tenant_id == tenant_id).update(
            {"tenant_id": None}, synchronize_session=False
        )
        for model, column in (
            (RentBill, RentBill.tenant_id),
            (UtilityBill, UtilityBill.tenant_id),
            (Payment, Payment.tenant_id),
            (MaintenanceRequest, MaintenanceRequest.tenant_id),
            (PasswordResetRequest, PasswordResetRequest.user_id),
            (Notification, Notification.user_id),
        ):
            session.query(model).filter(column == tenant_id).delete(synchronize_session=False)
        session.delete(tenant)
    session.expire_all()
    logger.info("Tenant %s deleted with all associated records", tenant_id)

"""
Appointment Routes

POST /appointments - Request a consultation
GET /appointments - My appointment requests
GET /appointments/{id} - One request
PATCH /appointments/{id}/cancel - Cancel a pending/confirmed request
"""

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends
from sqlalchemy import select
from typing import List

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import get_current_user
from visadocs.models import Appointment, User
from visadocs.services.email_service import send_appointment_confirmation
from visadocs.schemas.schemas import AppointmentCreate, AppointmentResponse

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def _get_own_appointment(db, appointment_id: int, user: User) -> Appointment:
    appointment = db.get(Appointment, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    if appointment.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="You do not have access to this appointment")
    return appointment


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate, background_tasks: BackgroundTasks, user: User = Depends(get_current_user)
):
    """Request a consultation; the student gets a confirmation email."""
    with get_db_session() as db:
        appointment = Appointment(
            user_id=user.id,
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
            preferred_contact=data.preferred_contact.value,
            subject=data.subject,
            message=data.message,
            requested_date=data.requested_date,
            status="pending",
        )
        db.add(appointment)
        db.flush()

    background_tasks.add_task(
        send_appointment_confirmation, appointment.email, appointment.name, appointment.subject,
        appointment.preferred_contact,
    )
    return AppointmentResponse.model_validate(appointment)


@router.get("", response_model=List[AppointmentResponse])
async def list_my_appointments(user: User = Depends(get_current_user)):
    with get_db_session() as db:
        rows = db.scalars(
            select(Appointment)
            .where(Appointment.user_id == user.id)
            .order_by(Appointment.created_at.desc(), Appointment.id.desc())
        ).all()
    return [AppointmentResponse.model_validate(r) for r in rows]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: int, user: User = Depends(get_current_user)):
    with get_db_session() as db:
        appointment = _get_own_appointment(db, appointment_id, user)
    return AppointmentResponse.model_validate(appointment)


@router.patch("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(appointment_id: int, user: User = Depends(get_current_user)):
    """Completed or already-cancelled requests cannot be cancelled."""
    with get_db_session() as db:
        appointment = _get_own_appointment(db, appointment_id, user)
        if appointment.status in ("completed", "cancelled"):
            raise HTTPException(status_code=400, detail=f"Appointment is already {appointment.status}")
        appointment.status = "cancelled"
    return AppointmentResponse.model_validate(appointment)

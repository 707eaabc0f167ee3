from fastapi import APIRouter, Depends
from app.api.deps import get_data_service, get_identity
from app.core.security import Identity
from app.db.gateway import DataService
from app.schemas.booking import BookingCreate, BookingCreated, BookingOut
from app.services import booking_service, package_service
from app.services.whatsapp_service import build_booking_message, build_whatsapp_link

router = APIRouter(tags=["bookings"])

@router.post("/bookings", response_model=BookingCreated, status_code=201)
def create_booking(body: BookingCreate,
                   data: DataService = Depends(get_data_service),
                   identity: Identity | None = Depends(get_identity)):
    # identity may be None here; the workflow itself refuses anonymous callers
    members = [m.model_dump() for m in body.members]
    booking = booking_service.create_booking(
        data, identity,
        package_id=body.package_id,
        booking_date=body.booking_date,
        travel_group_name=body.travel_group_name,
        number_of_members=body.number_of_members,
        total_price=body.total_price,
        advance_paid=body.advance_paid,
        members=members,
    )

    pkg = package_service.get_package(data, body.package_id)
    message = build_booking_message(
        package_title=pkg.title if pkg else "",
        destination=pkg.destination if pkg else "",
        contact_name=members[0]["name"],
        contact_phone=members[0]["phone"],
        travel_date=booking.booking_date,
        number_of_people=booking.number_of_members,
        total_amount=booking.total_price,
        advance_amount=booking.advance_paid,
        members=[(m["name"], m["phone"]) for m in members],
        group_name=booking.travel_group_name,
    )
    out = BookingCreated.model_validate(booking)
    out.whatsapp_url = build_whatsapp_link(message)
    return out

@router.get("/bookings/mine", response_model=list[BookingOut])
def my_bookings(data: DataService = Depends(get_data_service),
                identity: Identity | None = Depends(get_identity)):
    return booking_service.list_my_bookings(data, identity)

from fastapi import APIRouter, Depends, HTTPException
from app.api.deps import get_data_service, require_roles
from app.core.security import Identity
from app.db.gateway import DataService
from app.schemas.auth import ProfileOut
from app.schemas.booking import BookingOut, BookingStatusUpdate, DashboardMetricsOut, PaymentStatusUpdate
from app.schemas.package import AvailabilityPatch, AvailableDateIn, AvailableDateOut, PackageIn, PackageOut, PackagePatch
from app.services import booking_service, package_service, profile_service
from app.services.audit_service import log_audit
from app.services.metrics_service import compute_dashboard_metrics

router = APIRouter(prefix="/admin", tags=["admin"])

admin_only = require_roles("admin")

# -------------------------
# ADMIN: PACKAGES
# -------------------------
@router.get("/packages", response_model=list[PackageOut])
def admin_list_packages(data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return package_service.list_all_packages(data)

@router.post("/packages", response_model=PackageOut, status_code=201)
def admin_create_package(body: PackageIn, data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    pkg = package_service.create_package(data, body.model_dump())
    log_audit(data, me.user_id, "package.create", "package", pkg.id, {"title": pkg.title})
    return pkg

@router.patch("/packages/{package_id}", response_model=PackageOut)
def admin_update_package(package_id: str, body: PackagePatch,
                         data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    patch = body.model_dump(exclude_unset=True)
    pkg = package_service.update_package(data, package_id, patch)
    if not pkg:
        raise HTTPException(status_code=404, detail="Package not found")
    log_audit(data, me.user_id, "package.update", "package", package_id, {"fields": sorted(patch)})
    return pkg

@router.delete("/packages/{package_id}")
def admin_delete_package(package_id: str, data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    deleted = package_service.delete_package(data, package_id)
    log_audit(data, me.user_id, "package.delete", "package", package_id, {"deleted": deleted})
    return {"ok": True, "deleted": deleted}

@router.get("/packages/{package_id}/dates", response_model=list[AvailableDateOut])
def admin_list_dates(package_id: str, data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return package_service.list_package_dates(data, package_id)

@router.post("/packages/{package_id}/dates", response_model=AvailableDateOut, status_code=201)
def admin_add_date(package_id: str, body: AvailableDateIn,
                   data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    row = package_service.add_available_date(data, package_id, body.available_date, body.max_bookings)
    log_audit(data, me.user_id, "package_date.create", "package_date", row.id,
              {"packageId": package_id, "date": body.available_date.isoformat()})
    return row

@router.patch("/dates/{date_id}", response_model=AvailableDateOut)
def admin_set_date_availability(date_id: str, body: AvailabilityPatch,
                                data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    row = package_service.set_date_availability(data, date_id, body.is_available)
    if not row:
        raise HTTPException(status_code=404, detail="Date not found")
    log_audit(data, me.user_id, "package_date.availability", "package_date", date_id,
              {"packageId": row.package_id, "isAvailable": body.is_available})
    return row

@router.delete("/dates/{date_id}")
def admin_remove_date(date_id: str, data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    deleted = package_service.remove_available_date(data, date_id)
    log_audit(data, me.user_id, "package_date.delete", "package_date", date_id, {"deleted": deleted})
    return {"ok": True, "deleted": deleted}

# -------------------------
# ADMIN: BOOKINGS + METRICS
# -------------------------
@router.get("/bookings", response_model=list[BookingOut])
def admin_list_bookings(data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return booking_service.list_all_bookings(data)

@router.patch("/bookings/{booking_id}/status", response_model=BookingOut)
def admin_update_booking_status(booking_id: str, body: BookingStatusUpdate,
                                data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return booking_service.update_booking_status(
        data, booking_id, body.status,
        admin_notes=body.admin_notes,
        conversation_link=body.whatsapp_conversation_link,
        actor=me,
    )

@router.patch("/bookings/{booking_id}/payment", response_model=BookingOut)
def admin_update_payment_status(booking_id: str, body: PaymentStatusUpdate,
                                data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return booking_service.update_payment_status(data, booking_id, body.payment_status, actor=me)

@router.get("/metrics", response_model=DashboardMetricsOut)
def admin_metrics(data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return compute_dashboard_metrics(booking_service.list_all_bookings(data)).as_dict()

# -------------------------
# ADMIN: USERS
# -------------------------
@router.get("/users", response_model=list[ProfileOut])
def admin_list_users(data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    return profile_service.list_profiles(data)

@router.get("/users/{user_id}")
def admin_get_user(user_id: str, data: DataService = Depends(get_data_service), me: Identity = Depends(admin_only)):
    profile = profile_service.get_profile(data, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    bookings = booking_service.list_user_bookings(data, user_id)
    return {
        "profile": ProfileOut.model_validate(profile).model_dump(mode="json"),
        "bookings": [BookingOut.model_validate(b).model_dump(mode="json") for b in bookings],
    }

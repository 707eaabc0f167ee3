from fastapi import APIRouter, Depends, HTTPException
from app.api.deps import get_data_service
from app.db.gateway import DataService
from app.schemas.package import AvailableDateOut, PackageOut
from app.services import package_service

router = APIRouter(tags=["public"])


@router.get("/packages", response_model=list[PackageOut])
def list_packages(data: DataService = Depends(get_data_service)):
    """Active packages, newest first."""
    return package_service.list_active_packages(data)


@router.get("/packages/{package_id}", response_model=PackageOut)
def get_package(package_id: str, data: DataService = Depends(get_data_service)):
    pkg = package_service.get_package(data, package_id)
    if not pkg:
        raise HTTPException(status_code=404, detail="Package not found")
    return pkg


@router.get("/packages/{package_id}/dates", response_model=list[AvailableDateOut])
def list_package_dates(package_id: str, data: DataService = Depends(get_data_service)):
    """Bookable dates from today on, soonest first."""
    return package_service.list_available_dates(data, package_id)

"""Tour package service - Business logic for tour packages"""

import logging
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError, ValidationFailedError
from ...models import TourPackage, User, generate_id
from ...shared.schemas import build_page, paginate
from ...uploads import PACKAGE_COVERS, delete_reference_dir, delete_stored_files, resolve_stored_path, save_uploads
from .repository import TourPackageRepository
from .schemas import TourPackageCreate, TourPackageFilters, TourPackageResponse, TourPackageUpdate

logger = logging.getLogger(__name__)


class TourPackageService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TourPackageRepository()

    async def create_package(
        self, data: TourPackageCreate, cover_photo: list[UploadFile], user: User
    ) -> TourPackage:
        """Create a package; the id is generated first so the cover photo can live under it"""
        package_id = generate_id()
        try:
            stored = await save_uploads(cover_photo, PACKAGE_COVERS, package_id, "coverPhoto")
            package = TourPackage(
                id=package_id,
                package_name=data.package_name,
                tour_price=data.tour_price,
                total_seat=data.total_seat,
                desc=data.desc,
                cover_photo=stored[0]["path"] if stored else None,
                extra=data.extra or {},
                created_by_id=user.id,
            )
            self.db.add(package)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            delete_reference_dir(PACKAGE_COVERS, package_id)
            logger.error(f"❌ Failed to create tour package {data.package_name}: {e}")
            raise

        self.db.refresh(package)
        logger.info(f"✅ Tour package {package.id} created: {package.package_name}")
        return package

    def list_packages(self, filters: TourPackageFilters, page: int, limit: int) -> dict:
        query = self.repo.search_packages(self.db, filters)
        packages, total = paginate(query, page, limit)
        return build_page([TourPackageResponse.model_validate(p) for p in packages], total, page, limit)

    def get_stats(self) -> dict:
        total, seats, avg_price, min_price, max_price = self.repo.package_aggregates(self.db)
        return {
            "totalPackages": total or 0,
            "totalSeats": int(seats or 0),
            "averagePrice": round(float(avg_price or 0), 2),
            "minPrice": float(min_price or 0),
            "maxPrice": float(max_price or 0),
            "bookedPackages": self.repo.count_booked_packages(self.db),
        }

    def get_package(self, package_id: str) -> TourPackage:
        package = self.repo.get_package_by_id(self.db, package_id)
        if not package:
            raise NotFoundError("Tour package")
        return package

    async def update_package(
        self, package_id: str, data: TourPackageUpdate, cover_photo: list[UploadFile]
    ) -> TourPackage:
        """Partial update; a new cover photo replaces (and deletes) the old one"""
        package = self.get_package(package_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates and not cover_photo:
            raise ValidationFailedError("No fields to update")

        stored = await save_uploads(cover_photo, PACKAGE_COVERS, package.id, "coverPhoto")
        old_cover = package.cover_photo
        try:
            for key, value in updates.items():
                setattr(package, key, value)
            if stored:
                package.cover_photo = stored[0]["path"]
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            delete_stored_files([doc["path"] for doc in stored])
            logger.error(f"❌ Failed to update tour package {package_id}: {e}")
            raise

        if stored and old_cover:
            delete_stored_files([old_cover])

        self.db.refresh(package)
        logger.info(f"✏️ Tour package {package_id} updated: {sorted(updates)}")
        return package

    def delete_package(self, package_id: str) -> None:
        """Delete a package that no booking references"""
        package = self.get_package(package_id)

        booking_count = self.repo.count_bookings(self.db, package_id)
        if booking_count:
            logger.warning(f"⚠️ Refusing to delete tour package {package_id} with {booking_count} booking(s)")
            raise ConflictError(f"Cannot delete tour package with {booking_count} existing booking(s)")

        self.repo.delete_package(self.db, package)
        delete_reference_dir(PACKAGE_COVERS, package_id)
        logger.info(f"🗑️ Tour package {package_id} deleted")

    def bulk_delete(self, package_ids: list[str]) -> dict:
        deleted_count = 0
        failed_ids = []
        for package_id in package_ids:
            try:
                self.delete_package(package_id)
                deleted_count += 1
            except (NotFoundError, ConflictError):
                failed_ids.append(package_id)

        logger.info(f"🗑️ Bulk delete: {deleted_count} tour package(s) deleted, {len(failed_ids)} failed")
        return {"deletedCount": deleted_count, "failedIds": failed_ids}

    def get_cover_photo(self, package_id: str) -> tuple[Path, str]:
        """Cover photo path and the download name ``<packageName>-cover<ext>``"""
        package = self.get_package(package_id)
        if not package.cover_photo:
            raise NotFoundError("Cover photo")

        file_path = resolve_stored_path(package.cover_photo, "Cover photo")
        return file_path, f"{package.package_name}-cover{file_path.suffix}"

"""
Vehicle photo service.

Cover invariant: a vehicle has at most one cover photo (backed by the
``unique_cover_photo_per_vehicle`` constraint). Every mutation locks the
vehicle row so concurrent uploads see a consistent photo count.
"""
import logging

from django.conf import settings
from django.db import transaction
from PIL import Image

from backend.core.exceptions import InvalidInput, NotFound
from backend.locations.scoping import authorize_nested_resource
from .models import Vehicle, VehiclePhoto

logger = logging.getLogger('backend.inventory')


def is_image(upload):
    """Accept an upload only if it claims to be an image and Pillow can parse it."""
    content_type = getattr(upload, 'content_type', '') or ''
    if not content_type.startswith('image/'):
        return False
    try:
        with Image.open(upload) as img:
            img.verify()
    except (OSError, SyntaxError, ValueError):
        return False
    finally:
        upload.seek(0)
    return True


def _locked_vehicle(caller, vehicle_id):
    try:
        vehicle = Vehicle.objects.select_for_update().get(pk=vehicle_id)
    except Vehicle.DoesNotExist:
        raise NotFound(f'Vehicle {vehicle_id} not found.')
    authorize_nested_resource(caller, vehicle.store_id)
    return vehicle


def _photo_of(vehicle, photo_id):
    try:
        return vehicle.photos.get(pk=photo_id)
    except VehiclePhoto.DoesNotExist:
        raise NotFound(f'Photo {photo_id} not found for vehicle {vehicle.pk}.')


def upload_photos(caller, vehicle_id, files):
    """
    Store a batch of photos for a vehicle.

    The whole batch is rejected before anything is written when it is empty
    or larger than ``MAX_PHOTOS_PER_UPLOAD``. Non-image files are skipped.
    The first stored photo becomes the cover only if the vehicle had none.
    """
    files = list(files or [])
    max_files = settings.MAX_PHOTOS_PER_UPLOAD
    if not files:
        raise InvalidInput('No files were uploaded.')
    if len(files) > max_files:
        raise InvalidInput(f'At most {max_files} photos can be uploaded at once.')

    stored = []
    try:
        with transaction.atomic():
            vehicle = _locked_vehicle(caller, vehicle_id)
            current_count = vehicle.photos.count()

            photos = []
            for upload in files:
                if not is_image(upload):
                    logger.info(f"Skipping non-image upload '{getattr(upload, 'name', '')}' for vehicle {vehicle.pk}")
                    continue
                index = len(photos)
                photo = VehiclePhoto(
                    vehicle=vehicle,
                    is_cover=current_count == 0 and index == 0,
                    display_order=current_count + index,
                )
                photo.image.save(f'{vehicle.pk}_{upload.name}', upload, save=False)
                stored.append((photo.image.storage, photo.image.name))
                photo.save()
                photos.append(photo)
    except Exception:
        # rows were rolled back, so the files written so far are orphans
        for storage, name in stored:
            storage.delete(name)
        if stored:
            logger.warning(f"Upload to vehicle {vehicle_id} failed, removed {len(stored)} stored files")
        raise

    logger.info(f"Uploaded {len(photos)} of {len(files)} files to vehicle {vehicle_id} by caller {caller.user_id}")
    return photos


def set_cover(caller, vehicle_id, photo_id):
    with transaction.atomic():
        vehicle = _locked_vehicle(caller, vehicle_id)
        photo = _photo_of(vehicle, photo_id)
        vehicle.photos.filter(is_cover=True).exclude(pk=photo.pk).update(is_cover=False)
        if not photo.is_cover:
            photo.is_cover = True
            photo.save(update_fields=['is_cover', 'updated_at'])
    logger.info(f"Photo {photo_id} is now the cover of vehicle {vehicle_id}")
    return photo


def update_photo_order(caller, vehicle_id, photo_id, display_order):
    if display_order < 0:
        raise InvalidInput('display_order must be zero or greater.')
    with transaction.atomic():
        vehicle = _locked_vehicle(caller, vehicle_id)
        photo = _photo_of(vehicle, photo_id)
        photo.display_order = display_order
        photo.save(update_fields=['display_order', 'updated_at'])
    return photo


def delete_photo(caller, vehicle_id, photo_id):
    """Delete a photo; a deleted cover is replaced by the lowest-ordered remaining photo."""
    with transaction.atomic():
        vehicle = _locked_vehicle(caller, vehicle_id)
        photo = _photo_of(vehicle, photo_id)
        was_cover = photo.is_cover
        storage, name = photo.image.storage, photo.image.name
        photo.delete()

        promoted = None
        if was_cover:
            promoted = vehicle.photos.order_by('display_order', 'id').first()
            if promoted is not None:
                promoted.is_cover = True
                promoted.save(update_fields=['is_cover', 'updated_at'])

        if name:
            transaction.on_commit(lambda: storage.delete(name))

    logger.info(
        f"Photo {photo_id} deleted from vehicle {vehicle_id}"
        + (f", photo {promoted.pk} promoted to cover" if promoted else "")
    )

import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.locations.scoping import Caller
from .serializers import (
    VehicleSerializer, VehicleWriteSerializer, VehicleStatusSerializer,
    VehiclePhotoSerializer, PhotoOrderSerializer,
)
from . import photos, services

logger = logging.getLogger('backend.inventory')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def vehicle_list_create(request):
    """List vehicles in the caller's scope or create a new vehicle"""
    caller = Caller.from_user(request.user)

    if request.method == 'GET':
        return Response(services.list_vehicles(caller, request.query_params))

    serializer = VehicleWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    vehicle = services.create_vehicle(caller, serializer.validated_data)
    return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def vehicle_detail(request, pk):
    """Retrieve, update or soft-delete a vehicle"""
    caller = Caller.from_user(request.user)

    if request.method == 'GET':
        return Response(VehicleSerializer(services.get_vehicle(caller, pk)).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = VehicleWriteSerializer(data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        vehicle = services.update_vehicle(caller, pk, serializer.validated_data)
        return Response(VehicleSerializer(vehicle).data)
    else:  # DELETE
        services.delete_vehicle(caller, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def vehicle_status(request, pk):
    """Change the sale status of a vehicle"""
    serializer = VehicleStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    vehicle = services.update_vehicle_status(
        Caller.from_user(request.user), pk, serializer.validated_data['status']
    )
    return Response(VehicleSerializer(vehicle).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def vehicle_photo_upload(request, pk):
    """Upload a batch of photos (multipart field ``files``)"""
    uploaded = photos.upload_photos(Caller.from_user(request.user), pk, request.FILES.getlist('files'))
    return Response({
        'uploaded': len(uploaded),
        'photos': VehiclePhotoSerializer(uploaded, many=True).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def vehicle_photo_cover(request, pk, photo_id):
    """Make a photo the cover of its vehicle"""
    photo = photos.set_cover(Caller.from_user(request.user), pk, photo_id)
    return Response(VehiclePhotoSerializer(photo).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def vehicle_photo_order(request, pk, photo_id):
    """Change the display order of a photo"""
    serializer = PhotoOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    photo = photos.update_photo_order(
        Caller.from_user(request.user), pk, photo_id, serializer.validated_data['display_order']
    )
    return Response(VehiclePhotoSerializer(photo).data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def vehicle_photo_delete(request, pk, photo_id):
    """Delete a photo, promoting a new cover when needed"""
    photos.delete_photo(Caller.from_user(request.user), pk, photo_id)
    return Response(status=status.HTTP_204_NO_CONTENT)

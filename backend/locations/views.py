import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.core.permissions import IsAdminRole
from .serializers import StoreSerializer
from . import services

logger = logging.getLogger('backend.locations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def store_list_create(request):
    """List all stores with parent and branches or create a new store"""
    if request.method == 'GET':
        logger.info(f"User {request.user.username} requested store list")
        serializer = StoreSerializer(services.list_stores(), many=True)
        return Response(serializer.data)

    serializer = StoreSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    store = services.create_store(serializer.validated_data)
    logger.info(f"Store '{store.name}' created by {request.user.username}")
    return Response(StoreSerializer(services.get_store(store.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def store_detail(request, pk):
    """Retrieve, update or soft-delete a store"""
    store = services.get_store(pk)

    if request.method == 'GET':
        return Response(StoreSerializer(store).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = StoreSerializer(store, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        services.update_store(store, serializer.validated_data)
        logger.info(f"Store {pk} updated by {request.user.username}")
        return Response(StoreSerializer(services.get_store(pk)).data)
    else:  # DELETE
        services.delete_store(store)
        logger.info(f"Store {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

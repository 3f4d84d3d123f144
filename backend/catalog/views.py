import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from .models import Category, Brand, VehicleModel
from .serializers import CategorySerializer, BrandSerializer, VehicleModelSerializer
from . import services

logger = logging.getLogger('backend.catalog')


def _write(request, serializer_class, save, instance=None):
    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    saved = save(serializer.validated_data, instance=instance)
    action = 'updated' if instance else 'created'
    logger.info(f"{saved._meta.verbose_name.capitalize()} {saved.pk} {action} by {request.user.username}")
    return Response(
        serializer_class(saved).data,
        status=status.HTTP_200_OK if instance else status.HTTP_201_CREATED,
    )


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    """List all categories or create a new category"""
    if request.method == 'GET':
        categories = Category.objects.order_by('name')
        serializer = CategorySerializer(categories, many=True)
        return Response(serializer.data)
    return _write(request, CategorySerializer, services.save_category)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        return Response(CategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        return _write(request, CategorySerializer, services.save_category, instance=category)
    else:  # DELETE
        services.delete_category(category)
        logger.info(f"Category {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


# Brand views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def brand_list_create(request):
    """List all brands or create a new brand"""
    if request.method == 'GET':
        brands = Brand.objects.order_by('name')
        serializer = BrandSerializer(brands, many=True)
        return Response(serializer.data)
    return _write(request, BrandSerializer, services.save_brand)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def brand_detail(request, pk):
    """Retrieve, update or delete a brand"""
    brand = get_object_or_404(Brand, pk=pk)

    if request.method == 'GET':
        return Response(BrandSerializer(brand).data)
    elif request.method in ('PUT', 'PATCH'):
        return _write(request, BrandSerializer, services.save_brand, instance=brand)
    else:  # DELETE
        services.delete_brand(brand)
        logger.info(f"Brand {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


# Model views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def model_list_create(request):
    """List models (optionally of one brand) or create a new model"""
    if request.method == 'GET':
        models = VehicleModel.objects.select_related('brand').order_by('name')
        brand_id = request.query_params.get('brand_id')
        if brand_id:
            if not brand_id.isdigit():
                return Response({'error': 'brand_id must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
            models = models.filter(brand_id=int(brand_id))
        serializer = VehicleModelSerializer(models, many=True)
        return Response(serializer.data)
    return _write(request, VehicleModelSerializer, services.save_model)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def model_detail(request, pk):
    """Retrieve, update or delete a model"""
    vehicle_model = get_object_or_404(VehicleModel.objects.select_related('brand'), pk=pk)

    if request.method == 'GET':
        return Response(VehicleModelSerializer(vehicle_model).data)
    elif request.method in ('PUT', 'PATCH'):
        return _write(request, VehicleModelSerializer, services.save_model, instance=vehicle_model)
    else:  # DELETE
        services.delete_model(vehicle_model)
        logger.info(f"Model {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

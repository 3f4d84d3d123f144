from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from .fipe import FipeClient


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fipe_brands(request, tipo):
    """FIPE brands of a vehicle type"""
    return Response(FipeClient().get_brands(tipo))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fipe_models(request, tipo, marca):
    """FIPE models of a brand"""
    return Response(FipeClient().get_models(tipo, marca))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fipe_years(request, tipo, marca, modelo):
    """Model years available for a FIPE model"""
    return Response(FipeClient().get_years(tipo, marca, modelo))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fipe_value(request, tipo, marca, modelo, ano):
    """FIPE reference value of a model year"""
    return Response(FipeClient().get_value(tipo, marca, modelo, ano))

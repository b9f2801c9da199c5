from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    VariationTemplateViewSet,
    CombinationViewSet,
)

router = DefaultRouter()
router.register(r'templates', VariationTemplateViewSet, basename='variation-template')
router.register(r'combinations', CombinationViewSet, basename='combination')

urlpatterns = [
    path('', include(router.urls)),
]

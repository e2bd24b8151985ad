from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AttemptViewSet, AnswerViewSet

router = DefaultRouter()
router.register(r'attempts', AttemptViewSet, basename='attempts')
router.register(r'answers', AnswerViewSet, basename='answers')

urlpatterns = [
    path('', include(router.urls)),
]

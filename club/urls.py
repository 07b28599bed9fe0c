from django.urls import path

from . import views

urlpatterns = [
    path("send-push", views.send_push, name="send_push"),
    path("review/state", views.review_state, name="review_state"),
    path("review/init", views.review_init, name="review_init"),
    path("review/action", views.review_action, name="review_action"),
    path("review/request", views.review_request, name="review_request"),
    path("review/open-store", views.review_open_store, name="review_open_store"),
    path("review/reviewed", views.review_reviewed, name="review_reviewed"),
    path("review/reset", views.review_reset, name="review_reset"),
]

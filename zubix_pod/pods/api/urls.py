from django.urls import path

from .views import RoomMessagesView

app_name = "pods"

urlpatterns = [
    path(
        "rooms/<int:room_id>/messages/",
        RoomMessagesView.as_view(),
        name="room-messages",
    ),
]

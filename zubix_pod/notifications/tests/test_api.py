import pytest
from rest_framework import status
from rest_framework.test import APIClient

from tests.factories import create_user
from zubix_pod.notifications.models import Notification

pytestmark = pytest.mark.django_db


class TestNotificationEndpoints:
    def setup_method(self):
        self.user = create_user("alice")
        self.other = create_user("bob")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.mine = Notification.objects.create(
            recipient=self.user, title="Welcome", message="Say hi"
        )
        Notification.objects.create(recipient=self.user, title="Ping", message="...")
        self.theirs = Notification.objects.create(
            recipient=self.other, title="Private", message="not yours"
        )

    def test_list_only_shows_own_notifications(self):
        res = self.client.get("/api/v1/notifications/")
        assert res.status_code == status.HTTP_200_OK
        titles = {row["title"] for row in res.data["results"]}
        assert titles == {"Welcome", "Ping"}
        assert all(row["unread"] for row in res.data["results"])

    def test_mark_read(self):
        res = self.client.post(f"/api/v1/notifications/{self.mine.pk}/mark-read/")
        assert res.status_code == status.HTTP_204_NO_CONTENT
        self.mine.refresh_from_db()
        assert self.mine.is_read

    def test_cannot_touch_someone_elses_notification(self):
        res = self.client.post(f"/api/v1/notifications/{self.theirs.pk}/mark-read/")
        assert res.status_code == status.HTTP_404_NOT_FOUND
        res = self.client.delete(f"/api/v1/notifications/{self.theirs.pk}/")
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert Notification.objects.filter(pk=self.theirs.pk).exists()

    def test_mark_all_read(self):
        res = self.client.post("/api/v1/notifications/mark-all-read/")
        assert res.status_code == status.HTTP_204_NO_CONTENT
        assert not Notification.objects.filter(recipient=self.user, is_read=False).exists()
        self.theirs.refresh_from_db()
        assert not self.theirs.is_read

    def test_destroy(self):
        res = self.client.delete(f"/api/v1/notifications/{self.mine.pk}/")
        assert res.status_code == status.HTTP_204_NO_CONTENT
        assert not Notification.objects.filter(pk=self.mine.pk).exists()

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.catalog.domain.records import ListingStatus
from marketplace.models import Listing
from marketplace.tests.factories import AdminFactory, ListingFactory, UserFactory


class AdminListingViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin_user = AdminFactory()
        self.regular_user = UserFactory()

        self.active = ListingFactory()
        self.deleted = ListingFactory(status=ListingStatus.DELETED)
        self.sold = ListingFactory(status=ListingStatus.SOLD)

        self.list_url = reverse("marketplace:admin-listing-list")

    def detail_url(self, listing):
        return reverse("marketplace:admin-listing-detail", kwargs={"pk": str(listing.id)})

    def status_url(self, listing):
        return reverse("marketplace:admin-listing-change-status", kwargs={"pk": str(listing.id)})

    def test_regular_user_forbidden(self):
        self.client.force_authenticate(user=self.regular_user)

        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(self.status_url(self.active), {"status": "deleted"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_role_admin_without_superuser(self):
        moderator = UserFactory(role="admin")
        self.client.force_authenticate(user=moderator)

        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_200_OK)

    def test_admin_sees_every_status(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 3)

    def test_admin_status_facet(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.get(self.list_url, {"status": "deleted"})

        self.assertEqual([item["id"] for item in response.data["results"]], [str(self.deleted.id)])

    def test_admin_retrieve_deleted_without_counting_view(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.get(self.detail_url(self.deleted))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], ListingStatus.DELETED)
        self.deleted.refresh_from_db()
        self.assertEqual(self.deleted.view_count, 0)

    def test_take_down_listing(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.post(self.status_url(self.active), {"status": "deleted"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Listing.objects.get(pk=self.active.pk).status, ListingStatus.DELETED)

    def test_invalid_transition_conflict(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.post(self.status_url(self.sold), {"status": "active"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "invalid_status_transition")

    def test_unknown_status(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.post(self.status_url(self.active), {"status": "archived"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_status(self):
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.post(self.status_url(self.active), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("status", response.data["fields"])

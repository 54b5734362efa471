import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.tests.factories import UserFactory


class PublicProfileViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = UserFactory(display_name="Vintage Vera", rating=Decimal("4.5"), review_count=12)

    def test_anonymous_can_view_seller_card(self):
        response = self.client.get(reverse("authentication:public-profile", kwargs={"pk": self.seller.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], str(self.seller.pk))
        self.assertEqual(response.data["display_name"], "Vintage Vera")
        self.assertEqual(Decimal(str(response.data["rating"])), Decimal("4.5"))
        self.assertEqual(response.data["review_count"], 12)

    def test_private_fields_not_exposed(self):
        response = self.client.get(reverse("authentication:public-profile", kwargs={"pk": self.seller.pk}))

        for field in ("email", "role", "is_active", "password"):
            self.assertNotIn(field, response.data)

    def test_display_name_falls_back_to_username(self):
        user = UserFactory(display_name="")
        response = self.client.get(reverse("authentication:public-profile", kwargs={"pk": user.pk}))
        self.assertEqual(response.data["display_name"], user.username)

    def test_unknown_user(self):
        response = self.client.get(reverse("authentication:public-profile", kwargs={"pk": uuid.uuid4()}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "user_not_found")

    def test_malformed_id(self):
        response = self.client.get("/api/auth/users/not-a-uuid/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

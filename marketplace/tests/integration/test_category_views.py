from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.catalog.domain.records import ListingStatus
from marketplace.tests.factories import CategoryFactory, ListingFactory


class CategoryViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.tops = CategoryFactory(name="Tops", slug="tops")
        self.shoes = CategoryFactory(name="Shoes", slug="shoes")
        CategoryFactory(name="Hats", slug="hats", is_active=False)

        self.top = ListingFactory(category=self.tops)
        ListingFactory(category=self.tops, status=ListingStatus.SOLD)
        ListingFactory(category=self.shoes)

    def test_list_active_categories(self):
        response = self.client.get(reverse("marketplace:category-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["slug"] for item in response.data], ["shoes", "tops"])

    def test_retrieve(self):
        response = self.client.get(reverse("marketplace:category-detail", kwargs={"slug": "tops"}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "Tops")

    def test_retrieve_unknown(self):
        response = self.client.get(reverse("marketplace:category-detail", kwargs={"slug": "hats"}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "category_not_found")

    def test_category_listings(self):
        response = self.client.get(reverse("marketplace:category-listings", kwargs={"slug": "tops"}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["results"]], [str(self.top.id)])

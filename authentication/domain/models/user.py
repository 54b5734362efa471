import uuid

from django.contrib.auth.models import AbstractUser
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ("user", "User"),
        ("admin", "Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=150, blank=True)

    # Subject issued by the external identity provider, when the account was federated
    external_uid = models.CharField(max_length=128, unique=True, null=True, blank=True)

    # Role system - simple field
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="user")

    # Seller reputation, maintained outside the catalog
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    review_count = models.PositiveIntegerField(default=0)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        app_label = "authentication"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_display_name(self):
        return self.display_name or self.username

    def is_admin(self):
        return self.is_superuser or self.role == "admin"

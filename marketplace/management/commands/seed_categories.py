import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from marketplace.catalog.domain.records import DEFAULT_CATEGORIES
from marketplace.models import Category


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Seeds the default clothing categories into the database."

    def add_arguments(self, parser):
        parser.add_argument(
            "--update",
            action="store_true",
            help="Overwrite name and description of categories that already exist",
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("Seeding categories..."))

        created_count = 0
        with transaction.atomic():
            for record in DEFAULT_CATEGORIES:
                category, created = Category.objects.get_or_create(
                    slug=record.slug,
                    defaults={
                        "name": record.name,
                        "description": record.description,
                        "is_active": record.is_active,
                    },
                )
                if created:
                    self.stdout.write(self.style.SUCCESS(f"Created category: {category.name}"))
                    created_count += 1
                elif options["update"]:
                    category.name = record.name
                    category.description = record.description
                    category.save(update_fields=["name", "description"])
                    self.stdout.write(self.style.SUCCESS(f"Updated category: {category.name}"))
                else:
                    self.stdout.write(self.style.WARNING(f"Category already exists: {category.name}"))

        logger.info(f"Seeded {created_count} categories")
        self.stdout.write(self.style.SUCCESS(f"Category seeding complete. Created {created_count} categories."))

from django.contrib import admin

from .models import Category, Listing, Order


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active", "listing_count", "created_at")
    list_filter = ("is_active", "created_at")
    search_fields = ("name", "description")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("created_at",)

    def listing_count(self, obj):
        return obj.listings.filter(status="active").count()

    listing_count.short_description = "Active Listings"


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ("title", "seller", "category", "price", "condition", "status", "view_count", "created_at")
    list_filter = ("status", "condition", "is_featured", "category", "created_at")
    search_fields = ("title", "description", "brand", "seller__email", "seller__username")
    readonly_fields = ("id", "view_count", "created_at", "updated_at")

    fieldsets = (
        ("Basic Information", {"fields": ("id", "title", "description")}),
        ("Seller & Category", {"fields": ("seller", "category")}),
        ("Pricing", {"fields": ("price", "original_price")}),
        ("Garment Details", {"fields": ("condition", "brand", "size", "color", "material", "image_urls")}),
        ("Status & Visibility", {"fields": ("status", "is_featured")}),
        ("Metrics", {"fields": ("view_count",), "classes": ("collapse",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("seller", "category")

    actions = ["make_featured", "remove_featured"]

    def make_featured(self, request, queryset):
        queryset.update(is_featured=True)
        self.message_user(request, f"{queryset.count()} listings marked as featured.")

    make_featured.short_description = "Mark selected listings as featured"

    def remove_featured(self, request, queryset):
        queryset.update(is_featured=False)
        self.message_user(request, f"{queryset.count()} listings unmarked as featured.")

    remove_featured.short_description = "Remove featured status from selected listings"


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "listing_title", "buyer", "seller", "status", "amount", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("order_number", "listing_title", "buyer__email", "seller__email")
    readonly_fields = ("id", "order_number", "listing_id", "created_at", "updated_at", "completed_at", "cancelled_at")

from django.contrib import admin

from .models import AddOn, Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "kitchen_zone", "order", "is_active")
    list_filter = ("kitchen_zone", "is_active")


@admin.register(AddOn)
class AddOnAdmin(admin.ModelAdmin):
    list_display = ("name", "extra_price", "is_active")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "category", "is_active")
    list_filter = ("category", "is_active")
    filter_horizontal = ("allowed_add_ons",)

from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(
        max_length=100, unique=True, help_text=_("Name of the product category.")
    )
    kitchen_zone = models.ForeignKey(
        "settings.KitchenZone",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="categories",
        help_text=_("Sector that prepares this category. Blank routes to the general ticket."),
    )
    order = models.IntegerField(
        default=0,
        help_text=_("Display order for this category. Lower numbers appear first."),
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering = ["order", "name"]

    def __str__(self):
        return self.name


class AddOn(models.Model):
    """A side or extra (acompañamiento) that can be attached to a line item."""

    name = models.CharField(max_length=100, unique=True)
    extra_price = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        default=0,
        help_text=_("Amount added per unit of the line item it is attached to."),
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = _("Add-on")
        verbose_name_plural = _("Add-ons")
        ordering = ["name"]

    def __str__(self):
        return self.name


class Product(models.Model):
    name = models.CharField(max_length=200, help_text=_("Name of the product."))
    price = models.DecimalField(
        max_digits=12,
        decimal_places=0,
        help_text=_("The selling price of the product."),
    )
    category = models.ForeignKey(
        Category,
        related_name="products",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        help_text=_("Product category. Leave blank for uncategorized products."),
    )
    allowed_add_ons = models.ManyToManyField(
        AddOn,
        blank=True,
        related_name="products",
        help_text=_("Add-ons a server may attach to this product."),
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_cat_active_idx"),
        ]

    def __str__(self):
        return self.name

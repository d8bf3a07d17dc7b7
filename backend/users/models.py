from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    class Role(models.TextChoices):
        WAITER = "WAITER", _("Waiter")
        CASHIER = "CASHIER", _("Cashier")
        ADMIN = "ADMIN", _("Admin")

    role = models.CharField(
        _("role"), max_length=20, choices=Role.choices, default=Role.WAITER
    )
    full_name = models.CharField(
        _("full name"),
        max_length=150,
        blank=True,
        help_text=_("Name printed on tickets and shown on the kitchen display."),
    )

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        return self.full_name or self.get_full_name() or self.username

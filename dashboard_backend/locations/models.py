# locations/models.py

from django.db import models
from django.utils.text import slugify


class StoreLocation(models.Model):
    """
    A physical store / branch.

    - Stock levels and exchanges are scoped to a location.
    - slug is derived from name on save and must be unique.
    - Integer primary key (locations are addressed as 1, 2, 3 ... by staff tools).
    """

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)

    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip = models.CharField(max_length=20, blank=True)
    country_code = models.CharField(max_length=2, default="US")

    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def save(self, *args, **kwargs):
        if self.name and not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

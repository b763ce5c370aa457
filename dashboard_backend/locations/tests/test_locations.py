from django.test import TestCase

from locations.models import StoreLocation


class StoreLocationTests(TestCase):
    def test_slug_is_derived_from_name(self):
        location = StoreLocation.objects.create(name="Downtown Repair Hub")
        self.assertEqual(location.slug, "downtown-repair-hub")

    def test_explicit_slug_is_kept(self):
        location = StoreLocation.objects.create(name="Mall Kiosk", slug="kiosk-1")
        self.assertEqual(location.slug, "kiosk-1")

    def test_integer_primary_key(self):
        location = StoreLocation.objects.create(name="Airport")
        self.assertIsInstance(location.pk, int)

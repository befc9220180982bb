"""Example catalog models charted by the demo endpoints and the test-suite."""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class Product(models.Model):
    """A sellable product with stock and lifecycle fields."""

    name = models.CharField(max_length=200)
    description = models.TextField(null=True, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    rating = models.FloatField(null=True, blank=True)
    stock_count = models.IntegerField(default=0)
    category = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=50, default="active")
    created_at = models.DateTimeField(default=timezone.now)
    deleted_at = models.DateTimeField(null=True, blank=True)
    featured = models.BooleanField(default=False)

    class Meta:
        verbose_name = "Product"
        verbose_name_plural = "Products"

    def __str__(self) -> str:
        """Return the product name."""

        return self.name


class Review(models.Model):
    """A customer review of a Product."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True)
    reviewer_name = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Review"
        verbose_name_plural = "Reviews"

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Review(product={self.product_id}, rating={self.rating})"

from django.db import models


class Shop(models.Model):
    """Fair price shop that cardholders are attached to."""

    id = models.CharField(primary_key=True, max_length=20)
    name = models.CharField(max_length=200)
    district = models.CharField(max_length=100)
    address = models.TextField()
    contact_email = models.EmailField(blank=True, null=True)
    working_hours = models.CharField(max_length=100, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shops'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.id})"

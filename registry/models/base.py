import math
import random

from django.db import models
from django.utils import timezone


def generate_record_id(prefix):
    """Human-readable record number, e.g. TRF-2024-004213."""
    return f"{prefix}-{timezone.now().year}-{random.randint(0, 999999):06d}"


def ceil_days(start, end):
    """Whole days between two datetimes, rounded up."""
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / 86400)


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

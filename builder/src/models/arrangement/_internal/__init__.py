"""Internal implementation for the arrangement model. Use models.arrangement instead."""

from .item import Item, new_instance_id

__all__ = ['Item', 'new_instance_id']

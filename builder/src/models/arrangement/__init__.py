"""Arrangement model mixins package"""

from .query_mixin import ArrangementQueryMixin
from .transform_mixin import ArrangementTransformMixin
from .template_mixin import ArrangementTemplateMixin
from .serialization_mixin import ArrangementSerializationMixin
from .core import ArrangementModel
from ._internal.item import Item, new_instance_id

__all__ = [
    'ArrangementModel',
    'Item',
    'new_instance_id',
    'ArrangementQueryMixin',
    'ArrangementTransformMixin',
    'ArrangementTemplateMixin',
    'ArrangementSerializationMixin',
]

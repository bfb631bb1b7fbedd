"""Drag-and-drop interaction - turns drop events into session actions"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from models.flower import FlowerType

logger = logging.getLogger(__name__)

# Drop target id of the composition surface
COMPOSITION_SURFACE = 'composition'

DRAG_CATALOG = 'catalog'
DRAG_ITEM = 'item'


@dataclass
class DragContext:
    """What is being dragged and how far it has moved (working units)"""
    kind: str
    flower_type: Optional[FlowerType] = None
    instance_id: Optional[str] = None
    dx: float = 0.0
    dy: float = 0.0


class BuilderInteraction:
    """Handles drag gestures for one BuilderSession

    Pointer moves only accumulate; the model changes once, at drop, and
    that drop commits exactly one history entry. Translating screen pixels
    into working-space deltas is the host's job.
    """

    def __init__(self, session):
        """Initialize with the session drops are applied to

        Args:
            session: BuilderSession owning the model and history
        """
        self.session = session
        self.context: Optional[DragContext] = None

    @property
    def is_dragging(self) -> bool:
        return self.context is not None

    def drag_start(self, entity: Union[FlowerType, str]) -> bool:
        """Begin dragging a catalog flower or a placed item

        Args:
            entity: FlowerType from the catalog, or a placed item's instance_id

        Returns:
            True if a drag context was recorded
        """
        if isinstance(entity, FlowerType):
            self.context = DragContext(DRAG_CATALOG, flower_type=entity)
        elif isinstance(entity, str) and self.session.model.has_item(entity):
            self.context = DragContext(DRAG_ITEM, instance_id=entity)
        else:
            logger.debug("drag_start ignored for %r", entity)
            self.context = None
            return False
        return True

    def drag_move(self, dx: float, dy: float):
        """Accumulate pointer movement; never touches the model"""
        if self.context is None:
            return
        self.context.dx += dx
        self.context.dy += dy

    def drag_end(self, drop_target: Optional[str], dx: Optional[float] = None,
                 dy: Optional[float] = None, drop_position=None) -> Optional[str]:
        """Finish the drag

        Args:
            drop_target: Target id under the pointer, None if outside any
            dx, dy: Total delta since drag_start; the accumulated drag_move
                delta when omitted
            drop_position: Working-space (x, y) for catalog drops; the next
                slot is used when omitted

        Returns:
            instance_id of the added or moved item, or None if nothing changed
        """
        context, self.context = self.context, None
        if context is None:
            return None
        if drop_target != COMPOSITION_SURFACE:
            logger.debug("Dropped outside the composition surface (%r)", drop_target)
            return None

        if context.kind == DRAG_CATALOG:
            flower = context.flower_type
            if not flower.in_stock:
                logger.debug("%s is out of stock, drop ignored", flower.flower_type_id)
                return None
            try:
                return self.session.add(flower, drop_position)
            except ValueError as e:
                logger.warning("Drop of %s rejected: %s", flower.flower_type_id, e)
                return None

        total_dx = context.dx if dx is None else dx
        total_dy = context.dy if dy is None else dy
        if total_dx == 0 and total_dy == 0:
            return None
        item = self.session.model.get_item(context.instance_id)
        if item is None:
            # Removed while being dragged
            return None
        self.session.update(context.instance_id, position=item.pos.offset(total_dx, total_dy))
        return context.instance_id

    def drag_cancel(self):
        """Discard the current drag without changing anything"""
        self.context = None

"""
Bouquet Builder - Session

One bouquet being built: an ArrangementModel and its HistoryManager, owned
together. Nothing is shared between sessions, so two open bouquets never
see each other's undo history.

Every discrete action that changes the item list goes through the session
and commits exactly one history entry when it succeeds. Style changes
(wrap, ribbon, size) are applied directly and are not undoable.

Usage:
    session = BuilderSession()
    rose_id = session.add(BUILTIN_FLOWERS['red-rose'])
    session.rotate_item(rose_id)
    session.undo()

    png = session.export('png')
    session.export('file', path='out/my-bouquet.png')
"""

import logging
from typing import Mapping, Optional, Union

from constants import DEFAULT_BOUQUET_NAME, ROTATE_STEP, SCALE_STEP
from main.history_mixin import HistoryMixin
from models.arrangement import ArrangementModel
from models.config import EngineConfig
from models.flower import FlowerType
from models.templates import (
    ArrangementTemplate, OccasionPreset,
    BUILTIN_TEMPLATES, BUILTIN_PRESETS, BUILTIN_FLOWERS,
)
from services.composition_renderer import CompositionRenderer
from services.export_service import (
    ExportError, export_png_bytes, save_png, copy_to_clipboard, share_payload, download_filename,
)
from services.image_resolver import FlowerImageResolver
from utils.history_manager import HistoryManager

logger = logging.getLogger('Session')

EXPORT_TARGETS = ('png', 'file', 'clipboard', 'share')


class BuilderSession(HistoryMixin):
    """Model + history pair with the commit/undo/redo workflow

    Properties:
        model: The ArrangementModel (read it, mutate through the session)
        history: The session's own HistoryManager
        catalog: Mapping flower_type_id -> FlowerType for templates/presets
        bouquet_name: Title used for export labels and file names
    """

    def __init__(self, config: EngineConfig = None,
                 catalog: Optional[Mapping[str, FlowerType]] = None,
                 renderer: CompositionRenderer = None,
                 resolver: FlowerImageResolver = None):
        self.config = config or EngineConfig()
        self.model = ArrangementModel(self.config)
        self.history = HistoryManager(self.config.history_cap)
        self.catalog = catalog if catalog is not None else BUILTIN_FLOWERS
        self.bouquet_name = DEFAULT_BOUQUET_NAME
        self.is_saved = True

        self._resolver = resolver
        self._renderer = renderer
        self._is_applying_history = False

        # Initial empty state so the first action can be undone
        self._save_state("New bouquet")

    @property
    def renderer(self) -> CompositionRenderer:
        """Renderer, created on first use"""
        if self._renderer is None:
            self._renderer = CompositionRenderer(self._resolver)
        return self._renderer

    # ========================================
    # Item Actions (each commits once on success)
    # ========================================

    def add(self, flower_type: FlowerType, position=None) -> str:
        """Place a flower; see ArrangementModel.add"""
        instance_id = self.model.add(flower_type, position)
        self._save_state(f"Add {flower_type.name or flower_type.flower_type_id}")
        return instance_id

    def update(self, instance_id: str, **changes) -> bool:
        if not self.model.update(instance_id, **changes):
            return False
        self._save_state("Move flower" if set(changes) == {'position'} else "Edit flower")
        return True

    def remove(self, instance_id: str) -> bool:
        if not self.model.remove(instance_id):
            return False
        self._save_state("Remove flower")
        return True

    def clear(self) -> bool:
        """Remove every item; an already empty bouquet records nothing"""
        if self.model.item_count == 0:
            return False
        self.model.clear()
        self._save_state("Clear bouquet")
        return True

    def rotate_item(self, instance_id: str, step_degrees: float = ROTATE_STEP) -> bool:
        if not self.model.rotate_item(instance_id, step_degrees):
            return False
        self._save_state("Rotate flower")
        return True

    def scale_item(self, instance_id: str, step: float = SCALE_STEP) -> bool:
        if not self.model.scale_item(instance_id, step):
            return False
        self._save_state("Resize flower")
        return True

    def swap_flower(self, instance_id: str, flower_type: FlowerType) -> bool:
        if not self.model.swap_flower(instance_id, flower_type):
            return False
        self._save_state(f"Swap to {flower_type.name or flower_type.flower_type_id}")
        return True

    def duplicate_item(self, instance_id: str) -> Optional[str]:
        new_id = self.model.duplicate_item(instance_id)
        if new_id is not None:
            self._save_state("Duplicate flower")
        return new_id

    def bring_to_front(self, instance_id: str) -> bool:
        if not self.model.bring_to_front(instance_id):
            return False
        self._save_state("Bring to front")
        return True

    def send_to_back(self, instance_id: str) -> bool:
        if not self.model.send_to_back(instance_id):
            return False
        self._save_state("Send to back")
        return True

    # ========================================
    # Templates / Presets
    # ========================================

    def apply_template(self, template: Union[ArrangementTemplate, str]) -> list:
        """Replace the bouquet with a template (object or built-in id)"""
        if isinstance(template, str):
            template = self._lookup(BUILTIN_TEMPLATES, template, "template")
        ids = self.model.apply_template(template, self.catalog)
        self._save_state(f"Template: {template.name}")
        return ids

    def apply_preset(self, preset: Union[OccasionPreset, str]) -> list:
        """Replace the bouquet with an occasion preset (object or built-in id)"""
        if isinstance(preset, str):
            preset = self._lookup(BUILTIN_PRESETS, preset, "preset")
        ids = self.model.apply_preset(preset, self.catalog)
        self._save_state(f"Preset: {preset.name}")
        return ids

    @staticmethod
    def _lookup(library, key, kind):
        if key not in library:
            raise ValueError(f"Unknown {kind} '{key}', expected one of {sorted(library)}")
        return library[key]

    # ========================================
    # Style (not part of undo history)
    # ========================================

    def set_wrap_style(self, wrap_style: str):
        self.model.wrap_style = wrap_style
        self.is_saved = False

    def set_ribbon_color(self, color):
        self.model.ribbon_color = color
        self.is_saved = False

    def set_size(self, name: str):
        self.model.size = name
        self.is_saved = False

    # ========================================
    # Persistence
    # ========================================

    def design_data(self) -> dict:
        """Saved-design form of the bouquet, including its name"""
        data = self.model.to_design_data()
        data['name'] = self.bouquet_name
        return data

    def load_design(self, data: dict):
        """Replace the bouquet with a saved design and commit it

        Raises:
            ValueError: If the design is malformed (the bouquet is unchanged)
        """
        self.model.load_design_data(data)
        if data.get('name'):
            self.bouquet_name = data['name']
        self._save_state("Load design")
        self.is_saved = True

    # ========================================
    # Export
    # ========================================

    def render(self, label_text: Optional[str] = None):
        """Render the current bouquet to a PIL image"""
        return self.renderer.render(self.model, label_text=label_text or self.bouquet_name)

    def export(self, target: str = 'png', path: Optional[str] = None, label_text: Optional[str] = None):
        """Render once and hand the image to an export target

        Args:
            target: 'png' (bytes), 'file' (writes path), 'clipboard' or 'share'
            path: Output file for 'file'; defaults to the download file name
            label_text: Title override

        Returns:
            bytes, the written path, the clipboard QImage or a SharePayload

        Raises:
            ValueError: For an unknown target
            ExportError: If the host fails to take the image
        """
        if target not in EXPORT_TARGETS:
            raise ValueError(f"Unknown export target '{target}', expected one of {EXPORT_TARGETS}")

        title = label_text or self.bouquet_name
        image = self.render(title)
        if target == 'png':
            return export_png_bytes(image)
        if target == 'file':
            return save_png(image, path or download_filename(title))
        if target == 'clipboard':
            return copy_to_clipboard(image)
        return share_payload(image, title)


__all__ = ['BuilderSession', 'ExportError', 'EXPORT_TARGETS']

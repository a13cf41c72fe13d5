from .enhancement import EnhancementPipeline, EnhancementResult
from .preset_transfer import PresetTransfer, ConflictPolicy, ImportConflict, ImportPreview

__all__ = [
    'EnhancementPipeline',
    'EnhancementResult',
    'PresetTransfer',
    'ConflictPolicy',
    'ImportConflict',
    'ImportPreview',
]

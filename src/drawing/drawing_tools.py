"""
Drawing Tools - Placement tools for wells, septic fields, structures and rulers
"""

from enum import Enum
from typing import Callable, Dict, Optional

from PySide6.QtCore import Signal, QObject

from models.shapes import ShapeKind
from calculations.debug_logger import debug_logger


NumberPrompt = Callable[[str], Optional[float]]

STRUCTURE_LENGTH_PROMPT = "Structure length (ft):"
STRUCTURE_WIDTH_PROMPT = "Structure width (ft):"


class ToolType(Enum):
    """Available drawing tools"""
    SELECT = "select"
    WELL = "well"
    SEPTIC = "septic"
    STRUCTURE = "structure"
    RULER = "ruler"


class PlacementTool:
    """Base class for tools that place one shape per click"""

    kind: ShapeKind = None

    def collect_parameters(self, prompt: Optional[NumberPrompt]) -> Dict:
        """Gather placement parameters; icons and rulers need none"""
        return {}


class WellTool(PlacementTool):
    kind = ShapeKind.WELL


class SepticTool(PlacementTool):
    kind = ShapeKind.SEPTIC


class RulerTool(PlacementTool):
    kind = ShapeKind.RULER


class StructureTool(PlacementTool):
    """Asks for the structure length and width in feet"""

    kind = ShapeKind.STRUCTURE

    def collect_parameters(self, prompt: Optional[NumberPrompt]) -> Dict:
        if prompt is None:
            return {}
        length = prompt(STRUCTURE_LENGTH_PROMPT)
        if length is None:
            return {'length': None}
        width = prompt(STRUCTURE_WIDTH_PROMPT)
        return {'length': length, 'width': width}


class DrawingToolManager(QObject):
    """Manages the armed placement tool.

    SELECT means nothing is armed. A placement tool stays armed until it is
    used once or cancelled.
    """

    tool_changed = Signal(str)  # Current tool name

    def __init__(self):
        super().__init__()
        self.tools = {
            ToolType.WELL: WellTool(),
            ToolType.SEPTIC: SepticTool(),
            ToolType.STRUCTURE: StructureTool(),
            ToolType.RULER: RulerTool(),
        }
        self.current_tool_type = ToolType.SELECT

    def set_tool(self, tool_type):
        """Set the active drawing tool"""
        if tool_type != ToolType.SELECT and tool_type not in self.tools:
            return
        if tool_type == self.current_tool_type:
            return
        debug_logger.log_state_transition("Tools", self.current_tool_type.value, tool_type.value)
        self.current_tool_type = tool_type
        self.tool_changed.emit(tool_type.value)

    def get_current_tool(self) -> Optional[PlacementTool]:
        """Get the armed placement tool, if any"""
        return self.tools.get(self.current_tool_type)

    @property
    def is_placement_armed(self) -> bool:
        return self.current_tool_type in self.tools

    def cancel_tool(self):
        """Disarm the current tool"""
        self.set_tool(ToolType.SELECT)

"""
Site plan errors - exceptions raised inside the annotation core
Each is caught at the operation that triggered it and turned into a signal
"""


class SitePlanError(Exception):
    """Base exception for site plan errors"""
    pass

class InvalidCalibrationInput(SitePlanError):
    """Real-world calibration distance is missing, non-numeric or not positive"""
    pass

class InvalidPlacementInput(SitePlanError):
    """Structure placement dimensions are missing or not positive"""
    pass

class UnknownShapeReference(SitePlanError):
    """A shape id is not present in the store"""

    def __init__(self, shape_id):
        super().__init__(f"Unknown shape id: {shape_id}")
        self.shape_id = shape_id

class InvalidLabelInput(SitePlanError):
    """Inline label text did not parse to a finite, non-negative number"""
    pass

class InvalidShapeUpdate(SitePlanError):
    """An update would break a shape invariant (negative or non-finite size)"""
    pass

class ImageLoadError(SitePlanError):
    """Background image could not be read or decoded"""
    pass

class ExportError(SitePlanError):
    """Rendering or saving the exported raster failed"""
    pass

class GeometryError(Exception):
    """Base error for the geometry kernel."""


class InvalidGeometryError(GeometryError, ValueError):
    """Malformed input: non-finite numbers, wrong types, out-of-range parameters."""


class UnsupportedGeometryError(GeometryError):
    """Input that is well formed but describes a shape the kernel refuses to represent."""


class IllDefinedTransformError(GeometryError):
    """A 1D projection was requested from a matrix that couples the x and y axes."""

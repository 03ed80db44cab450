"""Exceptions raised by the flow map package."""


class FlowMapError(Exception):
    """Base class for flow map errors."""


class DataLoadError(FlowMapError):
    """Boundary or displacement data could not be read or validated."""


class SimulationNotReadyError(FlowMapError):
    """The simulation has no scene yet; call rebuild() first."""

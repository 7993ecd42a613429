"""Processing stage: annotation and blink rejection."""

from .annotation import (
    assign_segments,
    assign_epochs,
    attach_session_metadata,
    run_length_ids,
)
from .blinks import VelocityBounds, compute_velocity, compute_velocity_bounds, remove_blinks

__all__ = [
    'assign_segments',
    'assign_epochs',
    'attach_session_metadata',
    'run_length_ids',
    'VelocityBounds',
    'compute_velocity',
    'compute_velocity_bounds',
    'remove_blinks',
]

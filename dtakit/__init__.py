"""
A Python package for reading phase transition temperatures off DTA traces.

Loads Time/Temperature/DTA exports, computes the signal derivative, and
intersects two user-placed tangents to estimate the transition temperature.

Modules:
    - data_processing: Parses CSV exports, cleans rows, and computes derivatives.
    - geometry: Builds tangents, clips them to the viewport, and intersects them.
    - viewport: Keeps the main and derivative charts on the same X range.
    - session: Holds loaded curves, viewports, and the two tangent slots.
    - demo: Guided walkthrough that places both tangents automatically.
    - reporting / output: Formats results and writes CSV tables.
    - plotting: Renders a session as a two-panel figure.
"""

__version__ = "1.0.0"

from .config import CONFIG, AnalysisConfig, DemoConfig
from .data_processing import (
    calculate_derivatives,
    detect_header,
    ingest_rows,
    parse_csv,
    validate_and_clean_data,
    validate_data_row,
)
from .demo import CancellationToken, run_demo
from .errors import (
    ComputationError,
    DTAError,
    GeometryDegenerate,
    IngestError,
    ValidationError,
)
from .geometry import (
    calculate_intersection,
    clip_tangent_to_viewport,
    slope_from_derivative_point,
)
from .output import save_results_csv
from .reporting import create_results_dataframe, summarize_session
from .schema import DerivativePoint, Point, Sample, TangentParams, Viewport
from .session import (
    Session,
    clear_all,
    clear_slot,
    draw_tangent,
    handle_derivative_click,
    load_csv,
    load_rows,
    reset_zoom,
    select_slot,
    sync_zoom,
)
from .viewport import sync_viewports

__all__ = [
    # Configuration and errors
    "CONFIG",
    "AnalysisConfig",
    "DemoConfig",
    "DTAError",
    "IngestError",
    "ValidationError",
    "ComputationError",
    "GeometryDegenerate",
    # Data
    "Sample",
    "Point",
    "DerivativePoint",
    "TangentParams",
    "Viewport",
    "parse_csv",
    "detect_header",
    "validate_data_row",
    "validate_and_clean_data",
    "ingest_rows",
    "calculate_derivatives",
    # Geometry
    "slope_from_derivative_point",
    "clip_tangent_to_viewport",
    "calculate_intersection",
    "sync_viewports",
    # Session
    "Session",
    "load_csv",
    "load_rows",
    "select_slot",
    "draw_tangent",
    "clear_slot",
    "clear_all",
    "handle_derivative_click",
    "sync_zoom",
    "reset_zoom",
    "CancellationToken",
    "run_demo",
    # Results
    "summarize_session",
    "create_results_dataframe",
    "save_results_csv",
]

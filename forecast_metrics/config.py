"""
Configuration constants for the forecast metrics guide.

Demo parameters mirror the interactive panels: a fixed median, three nested
prediction intervals scaled by a width slider, an observed-value slider and a
coverage simulation with a sample-size slider.
"""


class Config:
    """Configuration settings for scoring demos, figures and logging."""

    # WIS panel
    DEMO_MEDIAN = 2000
    OBSERVED_RANGE = (1200, 2800)
    OBSERVED_DEFAULT = 2000
    WIDTH_RANGE = (30, 150)          # percent of the reference half-widths
    WIDTH_DEFAULT = 100
    AXIS_TICKS = [1200, 1600, 2000, 2400, 2800]

    # Reference half-widths of the nested intervals at 100% width
    NESTED_HALF_WIDTHS = {
        95: 400,
        80: 280,
        50: 160,
    }

    # Nominal levels, widest first
    NOMINAL_LEVELS = [95, 80, 50]

    # Symmetric quantile pairs used to build intervals from quantile forecasts
    QUANTILE_PAIRS = {
        50: (0.25, 0.75),
        80: (0.1, 0.9),
        95: (0.025, 0.975),
    }

    # Coverage panel
    SAMPLE_SIZE_RANGE = (10, 50)
    SAMPLE_SIZE_DEFAULT = 20
    CALIBRATION_TOLERANCE = 15       # percentage points
    GOOD_COVERAGE_THRESHOLD = 80
    CAUTION_COVERAGE_THRESHOLD = 50

    # Figures: blues and slates, no red/green pairs
    PALETTE = {
        'accent': '#2563eb',
        'primary': '#1e3a5f',
        'caution': '#f59e0b',
        'miss': '#64748b',
        'muted': '#e2e8f0',
        'muted_text': '#64748b',
        'band_95': '#1e40af',
        'band_80': '#3b82f6',
        'band_50': '#60a5fa',
    }
    BAND_ALPHA = {95: 0.15, 80: 0.25, 50: 0.4}
    STATUS_COLORS = {
        'good': PALETTE['accent'],
        'caution': PALETTE['caution'],
        'miss': PALETTE['miss'],
    }
    FIGURE_DPI = 200
    DEFAULT_OUTDIR = 'figures'

    LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

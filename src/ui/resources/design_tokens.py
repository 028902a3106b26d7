from dataclasses import dataclass


@dataclass(frozen=True)
class DesignTokens:
    """Design tokens for the single-window player theme."""

    # --- Colors ---
    PRIMARY_500: str = "#3FB7A6"  # Accent
    PRIMARY_600: str = "#5BC0B0"  # Hover (lighter)
    PRIMARY_700: str = "#24877A"  # Pressed (darker)

    NEUTRAL_900: str = "#0E1116"  # Window background
    NEUTRAL_800: str = "#141923"  # Panels
    NEUTRAL_750: str = "#18202C"  # Hover surface
    NEUTRAL_700: str = "#1E2633"  # Slider groove
    NEUTRAL_600: str = "#263041"  # Borders
    NEUTRAL_500: str = "#9AA2AF"  # Secondary text
    NEUTRAL_200: str = "#E6E8EC"  # Primary text

    # Sprite palette, cycled per bar
    SPRITE_COLORS: tuple = ("#3FB7A6", "#5BC0B0", "#F59E0B", "#EF4444", "#8B5CF6")

    # --- Spacing (4px base) ---
    SPACING_2: int = 8
    SPACING_3: int = 12
    SPACING_4: int = 16
    SPACING_6: int = 24

    # --- Typography ---
    FONT_FAMILY: str = '"Segoe UI Variable", "Segoe UI", "Helvetica Neue", sans-serif'
    FONT_SIZE_MINI: int = 11
    FONT_SIZE_XS: int = 12
    FONT_SIZE_BASE: int = 14
    FONT_SIZE_XL: int = 18

    # --- Borders ---
    RADIUS_SM: int = 4
    RADIUS_MD: int = 8
    RADIUS_FULL: int = 9999


tokens = DesignTokens()

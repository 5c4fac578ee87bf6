"""
Color conversion between sRGB and CIELAB (D65), plus the normalization
used to place LAB colors in the unit-scaled clustering space.
"""

import numpy as np

# CIELAB bounds used for normalization
MIN_L, MAX_L = 0.0, 100.0
MIN_A, MAX_A = -128.0, 127.0
MIN_B, MAX_B = -128.0, 127.0

LAB_MIN = np.array([MIN_L, MIN_A, MIN_B])
LAB_MAX = np.array([MAX_L, MAX_A, MAX_B])

# D65 reference white
XN, YN, ZN = 0.95047, 1.0, 1.08883

EPSILON = 0.008856
KAPPA = 903.3


# =============================================================================
# RGB <-> LAB
# =============================================================================

def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) RGB array (0-255) to LAB."""
    rgb_norm = np.asarray(rgb)[:, :3].astype(np.float64) / 255.0

    # Undo sRGB gamma
    mask = rgb_norm > 0.04045
    rgb_linear = np.where(mask, ((rgb_norm + 0.055) / 1.055) ** 2.4, rgb_norm / 12.92)

    r, g, b = rgb_linear[:, 0], rgb_linear[:, 1], rgb_linear[:, 2]
    x = (r * 0.4124564 + g * 0.3575761 + b * 0.1804375) / XN
    y = (r * 0.2126729 + g * 0.7151522 + b * 0.0721750) / YN
    z = (r * 0.0193339 + g * 0.1191920 + b * 0.9503041) / ZN

    fx = np.where(x > EPSILON, np.cbrt(x), (KAPPA * x + 16) / 116)
    fy = np.where(y > EPSILON, np.cbrt(y), (KAPPA * y + 16) / 116)
    fz = np.where(z > EPSILON, np.cbrt(z), (KAPPA * z + 16) / 116)

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b_val = 200 * (fy - fz)

    return np.column_stack([L, a, b_val])


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) LAB array to RGB (0-255, uint8)."""
    lab = np.atleast_2d(np.asarray(lab, dtype=np.float64))
    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    x = np.where(fx**3 > EPSILON, fx**3, (116 * fx - 16) / KAPPA) * XN
    y = np.where(L > KAPPA * EPSILON, fy**3, L / KAPPA) * YN
    z = np.where(fz**3 > EPSILON, fz**3, (116 * fz - 16) / KAPPA) * ZN

    r = x * 3.2404542 - y * 1.5371385 - z * 0.4985314
    g = -x * 0.9692660 + y * 1.8760108 + z * 0.0415560
    b_out = x * 0.0556434 - y * 0.2040259 + z * 1.0572252

    # Apply sRGB gamma
    rgb_linear = np.column_stack([r, g, b_out])
    mask = rgb_linear > 0.0031308
    rgb = np.where(mask, 1.055 * np.power(np.clip(rgb_linear, 0, None), 1/2.4) - 0.055, 12.92 * rgb_linear)

    return np.clip(np.round(rgb * 255), 0, 255).astype(np.uint8)


def lab_to_hex(lab: np.ndarray) -> str:
    """Convert a single LAB color to a hex string."""
    rgb = lab_to_rgb(lab)[0]
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def relative_luminance(rgb: np.ndarray) -> np.ndarray:
    """WCAG 2.0 relative luminance of an (n, 3) RGB array (0-255)."""
    rgb_norm = np.asarray(rgb)[:, :3].astype(np.float64) / 255.0
    linear = np.where(rgb_norm <= 0.03928, rgb_norm / 12.92, ((rgb_norm + 0.055) / 1.055) ** 2.4)
    return linear @ np.array([0.2126, 0.7152, 0.0722])


# =============================================================================
# Normalization
# =============================================================================

def normalize(values: np.ndarray, minimum, maximum) -> np.ndarray:
    """Map values from [minimum, maximum] onto [0, 1]."""
    return (np.asarray(values, dtype=np.float64) - minimum) / (np.asarray(maximum) - minimum)


def denormalize(values: np.ndarray, minimum, maximum) -> np.ndarray:
    """Inverse of normalize()."""
    return np.asarray(values, dtype=np.float64) * (np.asarray(maximum) - minimum) + minimum

"""Growth kinetics: dimensionless limitation factors.

The engine depends on light and temperature response functions only
through their call signatures:

- LightResponse: (intensity, optimum) -> factor in [0, 1]
- TemperatureResponse: (temperature, optimum, width) -> factor in [0, 1]

Any callable with that shape can be plugged into the engine. The built-in
models are registered by name so that configuration files can select them.
"""

from __future__ import annotations

import math
from typing import Protocol


class LightResponse(Protocol):
    """Light limitation model f(I)."""

    def __call__(self, intensity: float, optimum: float) -> float:
        """Return the light factor for an intensity in µmol/(m²·s)."""
        ...


class TemperatureResponse(Protocol):
    """Temperature limitation model f(T)."""

    def __call__(self, temperature: float, optimum: float, width: float) -> float:
        """Return the temperature factor for a temperature in °C."""
        ...


def steele_light_factor(intensity: float, optimum: float) -> float:
    """Steele (1962) photoinhibition light factor.

    f(I) = (I/I_opt)·exp(1 - I/I_opt)

    Peaks at exactly 1.0 when I = I_opt and declines on both sides.

    Args:
        intensity: Light intensity in µmol/(m²·s).
        optimum: Optimal intensity in µmol/(m²·s).

    Returns:
        Light factor in [0, 1].

    Examples:
        >>> steele_light_factor(200.0, 200.0)
        1.0
    """
    if intensity <= 0 or optimum <= 0:
        return 0.0
    ratio = intensity / optimum
    return ratio * math.exp(1.0 - ratio)


def gaussian_temperature_factor(
    temperature: float, optimum: float, width: float
) -> float:
    """Gaussian temperature factor.

    f(T) = exp(-α·(T - T_opt)²)

    Args:
        temperature: Culture temperature in °C.
        optimum: Optimal temperature in °C.
        width: Width parameter α in 1/°C².

    Returns:
        Temperature factor in [0, 1].
    """
    return math.exp(-width * (temperature - optimum) ** 2)


def multiplicative_growth_rate(mu_max: float, *factors: float) -> float:
    """Multiplicative limitation: µ = µ_max × Π fᵢ.

    Args:
        mu_max: Maximum specific growth rate in 1/day.
        *factors: Limitation factors, each in [0, 1].

    Returns:
        Gross growth rate in 1/day.
    """
    rate = mu_max
    for factor in factors:
        rate *= factor
    return rate


#: Registered light response models
LIGHT_RESPONSES: dict[str, LightResponse] = {
    "steele": steele_light_factor,
}

#: Registered temperature response models
TEMPERATURE_RESPONSES: dict[str, TemperatureResponse] = {
    "gaussian": gaussian_temperature_factor,
}


def get_light_response(name: str) -> LightResponse:
    """Look up a light response model by name.

    Raises:
        KeyError: If no model is registered under that name.
    """
    try:
        return LIGHT_RESPONSES[name]
    except KeyError:
        msg = f"Unknown light model '{name}'. Available: {sorted(LIGHT_RESPONSES)}"
        raise KeyError(msg) from None


def get_temperature_response(name: str) -> TemperatureResponse:
    """Look up a temperature response model by name.

    Raises:
        KeyError: If no model is registered under that name.
    """
    try:
        return TEMPERATURE_RESPONSES[name]
    except KeyError:
        msg = (
            f"Unknown temperature model '{name}'. "
            f"Available: {sorted(TEMPERATURE_RESPONSES)}"
        )
        raise KeyError(msg) from None
